"""Index and feed generation for Folio.

After the listing pages are written, each registered generator turns the
sorted posts into one more build artefact:

- PostIndexGenerator: the JSON post list the theme's Blogs, Archives and
  Tags components read.
- SitemapGenerator: sitemap.xml for search engines, when a hostname is set.

New artefacts are added by subclassing FeedGenerator and registering an
instance with a FeedRegistry.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any
from xml.sax.saxutils import escape

if TYPE_CHECKING:
    from .content import Post
    from .pagination import Page

logger = logging.getLogger(__name__)


class FeedGenerator(ABC):
    """Abstract base class for feed generators."""

    @abstractmethod
    def output_path(self, project_root: Path, config: dict[str, Any]) -> Path:
        """Return where this generator writes its file."""
        ...

    @abstractmethod
    def generate(
        self,
        posts: Sequence[Post],
        pages: Sequence[Page],
        config: dict[str, Any],
    ) -> str | None:
        """Generate file content.

        Args:
            posts: Posts in listing order.
            pages: Listing pages.
            config: Site configuration.

        Returns:
            File content, or None if the generator is not configured.
        """
        ...

    def write(
        self,
        project_root: Path,
        posts: Sequence[Post],
        pages: Sequence[Page],
        config: dict[str, Any],
    ) -> Path | None:
        """Generate and write the file.

        Returns:
            The path written, or None if skipped.
        """
        content = self.generate(posts, pages, config)
        if content is None:
            return None
        target = self.output_path(project_root, config)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", target)
        return target


class PostIndexGenerator(FeedGenerator):
    """Writes the sorted posts as JSON.

    Each entry carries the post's front matter and its regular path::

        [{"frontMatter": {"title": "...", "date": "2023-05-01"},
          "regularPath": "/posts/hello.html"}]
    """

    def output_path(self, project_root: Path, config: dict[str, Any]) -> Path:
        return project_root / config.get("posts_index", ".vitepress/posts.json")

    def generate(self, posts, pages, config) -> str | None:
        entries = [post.to_index_entry() for post in posts]
        return json.dumps(entries, ensure_ascii=False, indent=2, default=str) + "\n"


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml for search engine indexing.

    Lists the home page, every listing page and every post. Requires
    ``sitemap.hostname`` in the configuration.
    """

    def output_path(self, project_root: Path, config: dict[str, Any]) -> Path:
        return project_root / config.get("public_dir", "public") / "sitemap.xml"

    def generate(self, posts, pages, config) -> str | None:
        base_url = str(config.get("sitemap", {}).get("hostname") or "").rstrip("/")
        if not base_url:
            return None
        listing_dir = config.get("listing_dir", "blogs")
        lastmod = posts[0].date.isoformat() if posts else None

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            _url_entry(f"{base_url}/", lastmod),
        ]
        for page in pages:
            lines.append(_url_entry(f"{base_url}{page.url(listing_dir)}", lastmod))
        for post in posts:
            lines.append(_url_entry(f"{base_url}{post.url}", post.date.isoformat()))
        lines.append("</urlset>")
        return "\n".join(lines) + "\n"


def _url_entry(loc: str, lastmod: str | None) -> str:
    if lastmod is None:
        return f"  <url><loc>{escape(loc)}</loc></url>"
    return f"  <url><loc>{escape(loc)}</loc><lastmod>{lastmod}</lastmod></url>"


class FeedRegistry:
    """Registry for managing feed generators."""

    def __init__(self) -> None:
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        self._generators.append(generator)

    def generate_all(
        self,
        project_root: Path,
        posts: Sequence[Post],
        pages: Sequence[Page],
        config: dict[str, Any],
    ) -> list[Path]:
        """Run all registered generators.

        Returns:
            Paths of the files that were written.
        """
        written = []
        for generator in self._generators:
            path = generator.write(project_root, posts, pages, config)
            if path is not None:
                written.append(path)
        return written


def create_default_feed_registry() -> FeedRegistry:
    """Create a registry with the post index and sitemap generators."""
    registry = FeedRegistry()
    registry.register(PostIndexGenerator())
    registry.register(SitemapGenerator())
    return registry
