"""Index building for Folio.

This module ties the pieces together: it loads the configuration, discovers
and loads the posts, sorts them, writes the listing pages and runs the feed
generators.

Key functions:
- build_index: Build everything once.
- load_posts: Discover and load the posts without writing anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import TemplateError, TemplateSyntaxError

from .collections import PostCollection
from .config import load_config, validate_page_size
from .content import Post, PostBuilder, PostLoader
from .extractors import FrontmatterError
from .feeds import FeedRegistry, create_default_feed_registry
from .pagination import ListingPageWriter, Page, paginate
from .templates import LISTING_TEMPLATE, TemplateEngine

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during the build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuildResult:
    """Result of a build.

    Attributes:
        posts: All posts, newest first.
        pages: Listing pages.
        written: Every file written by the build.
        config: Configuration the build ran with.
    """

    posts: PostCollection
    pages: list[Page]
    written: list[Path]
    config: dict[str, Any]


def load_posts(
    project_root: Path,
    config: dict[str, Any] | None = None,
    include_drafts: bool = False,
) -> PostCollection:
    """Discover and load posts, newest first.

    Args:
        project_root: Root directory of the blog.
        config: Configuration; loaded from folio.yaml when omitted.
        include_drafts: Whether to include draft posts.

    Returns:
        Sorted PostCollection.

    Raises:
        BuildError: If a post cannot be read or has invalid front matter or date.
    """
    if config is None:
        config = load_config(project_root)
    loader = PostLoader(project_root, config["posts_dir"], config.get("exclude"))
    builder = PostBuilder(project_root)
    posts: list[Post] = []
    for path in loader.iter_files(include_drafts):
        try:
            posts.append(builder.build(path))
        except FrontmatterError as exc:
            raise BuildError(path, str(exc), exc) from exc
        except UnicodeDecodeError as exc:
            raise BuildError(path, f"Not UTF-8 text: {exc}", exc) from exc
        except ValueError as exc:
            raise BuildError(path, f"Invalid date: {exc}", exc) from exc
        except OSError as exc:
            message = f"Could not read post: {exc.strerror or exc}"
            raise BuildError(path, message, exc) from exc
    return PostCollection(posts).sorted()


def build_index(
    project_root: Path,
    include_drafts: bool = False,
    page_size: int | None = None,
    feeds: FeedRegistry | None = None,
) -> BuildResult:
    """Build the listing pages and post index.

    Args:
        project_root: Root directory of the blog.
        include_drafts: Whether to include draft posts (starting with _).
        page_size: Optional override for the configured page size.
        feeds: Optional custom feed registry.

    Returns:
        BuildResult describing what was built.
    """
    config = load_config(project_root)
    if page_size is not None:
        config["page_size"] = validate_page_size(page_size)

    posts = load_posts(project_root, config, include_drafts=include_drafts)
    pages = paginate(posts, config["page_size"])

    engine = TemplateEngine(project_root / config["templates_dir"])
    writer = ListingPageWriter(
        project_root / config["listing_dir"],
        engine=engine,
        title=config["listing_title"],
        component=config["blogs_component"],
    )
    try:
        written = writer.write(pages)
    except TemplateSyntaxError as exc:
        raise BuildError(
            _template_path(exc, writer),
            f"Template syntax error on line {exc.lineno}: {exc.message}",
            exc,
        ) from exc
    except TemplateError as exc:
        raise BuildError(
            _template_path(exc, writer), f"Template error: {exc.message}", exc
        ) from exc

    registry = feeds or create_default_feed_registry()
    written.extend(registry.generate_all(project_root, posts, pages, config))

    logger.info("Indexed %d posts into %d listing pages", len(posts), len(pages))
    return BuildResult(posts=posts, pages=pages, written=written, config=config)


def _template_path(exc: TemplateError, writer: ListingPageWriter) -> Path:
    """Best guess at the template file behind a Jinja2 error."""
    filename = getattr(exc, "filename", None)
    if filename:
        return Path(filename)
    for directory in writer.engine.search_path:
        candidate = directory / LISTING_TEMPLATE
        if candidate.exists():
            return candidate
    return writer.listing_dir
