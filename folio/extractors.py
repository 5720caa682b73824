"""Metadata extractors for Folio.

Each extractor pulls one piece of post metadata out of a markdown source. The
composite runs them in order and hands each one the metadata gathered so far,
so later extractors can build on the front matter.

Key classes:
- FrontmatterExtractor: Parses the YAML front matter block.
- TitleExtractor: Title from front matter, first heading or filename.
- TagExtractor: Tags from front matter.
- DateExtractor: Date from front matter, filename prefix or today.
- DescriptionExtractor: Description from front matter or first paragraph.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from .utils import (
    extract_date_from_name,
    first_paragraph,
    normalize_date,
    split_tags,
    titleize,
)

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?", re.DOTALL | re.MULTILINE
)


class FrontmatterError(ValueError):
    """Raised when a front matter block is not valid YAML."""


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content).

    Raises:
        FrontmatterError: If the block between the ``---`` markers is not YAML.
    """
    text = text.lstrip("\ufeff")
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid front matter: {exc}") from exc
    if not isinstance(data, dict):
        return {}, text
    return data, text[match.end() :]


class FrontmatterExtractor:
    """Splits the source into front matter and body."""

    def extract(self, content: str, path: Path, metadata: dict[str, Any]) -> dict[str, Any]:
        frontmatter, body = extract_frontmatter(content)
        return {"frontmatter": frontmatter, "body": body}


class TitleExtractor:
    """Extracts the post title.

    Prefers an explicit ``title`` in the front matter, then the first
    level-1 heading (``# Title``) of the body, then the titleized filename.
    """

    def extract(self, content: str, path: Path, metadata: dict[str, Any]) -> dict[str, Any]:
        title = metadata.get("frontmatter", {}).get("title")
        if title:
            return {"title": str(title)}
        for line in metadata.get("body", content).splitlines():
            stripped = line.strip()
            if stripped.startswith("# "):
                return {"title": stripped.lstrip("# ").strip()}
        return {"title": titleize(path.name)}


class TagExtractor:
    """Extracts tags from the ``tags`` front matter key."""

    def extract(self, content: str, path: Path, metadata: dict[str, Any]) -> dict[str, Any]:
        return {"tags": split_tags(metadata.get("frontmatter", {}).get("tags"))}


class DateExtractor:
    """Extracts the publication date.

    Looks at the ``date`` front matter key, then a YYYY-MM-DD filename
    prefix, and finally falls back to today.

    Raises:
        ValueError: If the front matter date is not a valid calendar date.
    """

    def extract(self, content: str, path: Path, metadata: dict[str, Any]) -> dict[str, Any]:
        raw = metadata.get("frontmatter", {}).get("date")
        if raw is not None:
            return {"date": normalize_date(raw)}
        from_name = extract_date_from_name(path.stem)
        return {"date": from_name or date.today()}


class DescriptionExtractor:
    """Extracts a short description for listings."""

    def extract(self, content: str, path: Path, metadata: dict[str, Any]) -> dict[str, Any]:
        explicit = metadata.get("frontmatter", {}).get("description")
        if explicit:
            return {"description": str(explicit)}
        return {"description": first_paragraph(metadata.get("body", content))}


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Runs every registered extractor in order and merges their results. Each
    extractor sees the merged metadata of the ones before it.
    """

    def __init__(self, extractors: list | None = None):
        if extractors is None:
            self._extractors = [
                FrontmatterExtractor(),
                TitleExtractor(),
                TagExtractor(),
                DateExtractor(),
                DescriptionExtractor(),
            ]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        """Add an extractor to the end of the chain."""
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract all metadata from content.

        Args:
            content: Source content.
            path: Path to the source file.

        Returns:
            Dictionary with all extracted metadata.
        """
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(content, path, result))
        return result


# Default composite extractor instance
default_metadata_extractor = CompositeMetadataExtractor()
