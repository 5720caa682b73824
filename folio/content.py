"""Post discovery and loading for Folio.

This module finds the markdown posts of a blog, extracts their metadata and
creates Post objects describing them.

Key classes:
- Post: Dataclass representing a single blog post.
- PostLoader: Discovers post source files.
- UrlDeriver: Maps a source path to the URL the site serves it under.
- PostBuilder: Builds a Post from a source file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from .extractors import CompositeMetadataExtractor, default_metadata_extractor
from .utils import is_draft, is_markdown, slugify


@dataclass
class Post:
    """Represents a blog post and the metadata the theme lists it with.

    Attributes:
        path: Path to the source file.
        url: Site path of the rendered post, e.g. /posts/hello.html.
        date: Normalised publication date.
        title: Human-readable title.
        description: Short description for listings.
        tags: Tags from the front matter.
        slug: URL-friendly slug of the filename.
        draft: Whether this is a draft post.
        frontmatter: Front matter with the date normalised to YYYY-MM-DD.
    """

    path: Path
    url: str
    date: date
    title: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    slug: str = ""
    draft: bool = False
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def year(self) -> int:
        return self.date.year

    def to_index_entry(self) -> dict[str, Any]:
        """Return the record the theme reads for this post."""
        return {"frontMatter": self.frontmatter, "regularPath": self.url}


class PostLoader:
    """Discovers post source files.

    Only markdown files directly inside the posts directory are considered.

    Attributes:
        project_root: Root directory of the blog.
        posts_dir: Directory holding the posts.
        exclude: Paths that are never treated as posts, relative to the project
            root or to the posts directory.
    """

    def __init__(self, project_root: Path, posts_dir: str = "posts", exclude: list[str] | None = None):
        self.project_root = project_root
        self.posts_dir = project_root / posts_dir
        self.exclude = set(exclude or [])

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List post files in a stable order.

        Args:
            include_drafts: Whether to include files starting with ``_``.

        Returns:
            Sorted list of paths to post files.
        """
        if not self.posts_dir.is_dir():
            return []
        files: list[Path] = []
        for path in sorted(self.posts_dir.iterdir()):
            if not path.is_file() or not is_markdown(path):
                continue
            if self._is_excluded(path):
                continue
            if is_draft(path) and not include_drafts:
                continue
            files.append(path)
        return files

    def _is_excluded(self, path: Path) -> bool:
        return (
            path.relative_to(self.project_root).as_posix() in self.exclude
            or path.relative_to(self.posts_dir).as_posix() in self.exclude
        )


class UrlDeriver:
    """Derives the site URL of a post from its source path."""

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def derive(self, path: Path) -> str:
        """Map ``posts/hello.md`` to ``/posts/hello.html``."""
        rel = path.relative_to(self.project_root).as_posix()
        if rel.lower().endswith(".md"):
            rel = rel[: -len(".md")] + ".html"
        return f"/{rel}"


class PostBuilder:
    """Builds Post objects from source files.

    Attributes:
        project_root: Root directory of the blog.
        metadata_extractor: Composite metadata extractor.
        url_deriver: URL deriver instance.
    """

    def __init__(
        self,
        project_root: Path,
        metadata_extractor: CompositeMetadataExtractor | None = None,
    ):
        self.project_root = project_root
        self.metadata_extractor = metadata_extractor or default_metadata_extractor
        self.url_deriver = UrlDeriver(project_root)

    def build(self, path: Path) -> Post:
        """Build a Post object from a source file.

        Args:
            path: Path to the source file.

        Returns:
            Post object.

        Raises:
            ValueError: If the front matter or its date is invalid.
        """
        raw = path.read_text(encoding="utf-8")
        metadata = self.metadata_extractor.extract(raw, path)
        post_date = metadata["date"]
        frontmatter = dict(metadata.get("frontmatter", {}))
        frontmatter["date"] = post_date.isoformat()
        return Post(
            path=path,
            url=self.url_deriver.derive(path),
            date=post_date,
            title=metadata["title"],
            description=metadata.get("description", ""),
            tags=metadata.get("tags", []),
            slug=slugify(path.stem),
            draft=is_draft(path),
            frontmatter=frontmatter,
        )
