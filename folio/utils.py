"""Utility functions for Folio.

This module contains the small string, path and date helpers used throughout
the Folio codebase.

Key functions:
    slugify: Convert filenames to URL slugs.
    titleize: Convert filenames to human-readable titles.
    extract_date_from_name: Extract date from filename prefix.
    normalize_date: Coerce a front-matter date value to a calendar date.
    split_tags: Normalise a front-matter tags value to a list.
    first_paragraph: Extract a short description from text.
    is_markdown: Check if a path is a Markdown file.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

# Fallback formats tried after ISO 8601 when parsing string dates
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def _split_date_prefix(name: str) -> list[str] | None:
    """Return the parts after a YYYY-MM-DD- prefix, or None without one."""
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return parts[3:]
    return None


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = name
    rest = _split_date_prefix(cleaned)
    if rest is not None:
        cleaned = "-".join(rest)
    # Unicode letters and digits survive; runs of anything else become "-"
    cleaned = re.sub(r"[\W_]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("getting-started.md")
        'Getting Started'
    """
    base = Path(filename).stem
    rest = _split_date_prefix(base)
    if rest is not None:
        base = "-".join(rest)
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def extract_date_from_name(name: str) -> date | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        date object if a valid date prefix is found, None otherwise.

    Examples:
        >>> extract_date_from_name("2024-01-15-hello-world")
        datetime.date(2024, 1, 15)

        >>> extract_date_from_name("hello-world")
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def _parse_date_string(value: str) -> date:
    text = value.strip()
    if not text:
        raise ValueError("empty date")
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return normalize_date(datetime.fromisoformat(iso))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date {value!r}")


def normalize_date(value: Any) -> date:
    """Coerce a front-matter date value to a calendar date.

    Timezone-aware datetimes are converted to UTC before the calendar date is
    taken; naive datetimes and plain dates are used as-is. Strings are parsed
    as ISO 8601 first, then with a handful of common human formats.

    Args:
        value: Date, datetime or string from the front matter.

    Returns:
        The calendar date.

    Raises:
        ValueError: If the value is not a recognisable calendar date.

    Examples:
        >>> normalize_date("2023-05-01T23:30:00-02:00")
        datetime.date(2023, 5, 2)
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_date_string(value)
    raise ValueError(f"Unsupported date value {value!r}")


def split_tags(value: Any) -> list[str]:
    """Normalise a front-matter tags value into a list of unique tags.

    A string is split on commas, a list is used as-is. Blank entries are
    dropped and order of first appearance is kept.

    Examples:
        >>> split_tags("vue, css, vue")
        ['vue', 'css']
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    else:
        items = [str(value)]
    seen: list[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def first_paragraph(text: str, limit: int = 160) -> str:
    """Extract and clean the first paragraph from text.

    Skips headings, images and fenced code, strips HTML tags and collapses
    whitespace, then truncates to the specified limit.

    Args:
        text: Text content to extract from.
        limit: Maximum character length of result.

    Returns:
        Cleaned first paragraph, truncated to limit characters.
    """
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "```", "<script", "---")):
            continue
        para = re.sub(r"<[^>]+>", "", para)
        collapsed = " ".join(para.split())
        if collapsed:
            return collapsed[:limit]
    return ""


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == ".md"


def is_draft(path: Path) -> bool:
    """Drafts are files whose name starts with an underscore."""
    return path.name.startswith("_")
