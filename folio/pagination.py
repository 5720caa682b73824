"""Pagination of the post list into listing pages.

The sorted post list is cut into consecutive pages of ``page_size`` posts.
Every page becomes a markdown file in the listing directory which the site
renders through the theme's Blogs component: page 1 is ``index.md``, the
rest are ``page_<n>.md``.

Key pieces:
- Page: Dataclass describing one listing page.
- page_count / paginate: Pagination arithmetic.
- ListingPageWriter: Writes listing pages and prunes stale ones.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import validate_page_size
from .content import Post
from .templates import LISTING_TEMPLATE, TemplateEngine

logger = logging.getLogger(__name__)

_PAGE_FILE_RE = re.compile(r"^page_(\d+)\.md$")


@dataclass
class Page:
    """One listing page.

    Attributes:
        number: 1-based page number.
        posts: Posts listed on this page.
        total: Total number of pages.
        page_size: Posts per page.
    """

    number: int
    posts: list[Post]
    total: int
    page_size: int

    @property
    def start(self) -> int:
        return self.page_size * (self.number - 1)

    @property
    def end(self) -> int:
        return self.page_size * self.number

    @property
    def is_first(self) -> bool:
        return self.number == 1

    @property
    def is_last(self) -> bool:
        return self.number == self.total

    @property
    def filename(self) -> str:
        return "index.md" if self.is_first else f"page_{self.number}.md"

    def url(self, listing_dir: str) -> str:
        """Site path of this page, e.g. /blogs/ or /blogs/page_2.html."""
        base = "/" + listing_dir.strip("/")
        if self.is_first:
            return f"{base}/"
        return f"{base}/page_{self.number}.html"


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed to list ``total`` posts.

    Examples:
        >>> page_count(21, 10)
        3
        >>> page_count(0, 10)
        0
    """
    validate_page_size(page_size)
    return -(-total // page_size)


def paginate(posts: Sequence[Post], page_size: int) -> list[Page]:
    """Split an already sorted post list into contiguous pages.

    Args:
        posts: Posts in listing order.
        page_size: Maximum posts per page.

    Returns:
        Pages in order; empty when there are no posts.
    """
    total = page_count(len(posts), page_size)
    pages = []
    for number in range(1, total + 1):
        start = page_size * (number - 1)
        pages.append(
            Page(
                number=number,
                posts=list(posts[start : start + page_size]),
                total=total,
                page_size=page_size,
            )
        )
    return pages


class ListingPageWriter:
    """Writes listing page markdown files.

    Attributes:
        listing_dir: Directory the listing pages are written to.
        engine: Template engine rendering the page source.
        title: Title placed in each page's front matter.
        component: Import path of the Blogs component.
    """

    def __init__(
        self,
        listing_dir: Path,
        engine: TemplateEngine | None = None,
        title: str = "Blogs",
        component: str = "../.vitepress/theme/components/Blogs.vue",
    ):
        self.listing_dir = listing_dir
        self.engine = engine or TemplateEngine()
        self.title = title
        self.component = component

    def render(self, page: Page) -> str:
        return self.engine.render(
            LISTING_TEMPLATE,
            {"page": page, "title": self.title, "component": self.component},
        )

    def write(self, pages: Sequence[Page]) -> list[Path]:
        """Write every page and remove page files beyond the last one.

        Args:
            pages: Pages produced by :func:`paginate`.

        Returns:
            Paths of the files written.
        """
        written: list[Path] = []
        for page in pages:
            target = self.listing_dir / page.filename
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.render(page), encoding="utf-8")
            logger.debug("Wrote listing page %s", target)
            written.append(target)
        self._prune(len(pages))
        return written

    def _prune(self, total: int) -> None:
        if not self.listing_dir.is_dir():
            return
        for path in self.listing_dir.iterdir():
            match = _PAGE_FILE_RE.match(path.name)
            if not match:
                continue
            number = int(match.group(1))
            # the first page lives in index.md, never page_1.md
            if number > total or number <= 1:
                path.unlink()
                logger.debug("Removed stale listing page %s", path)
