"""Utility functions for Folio.

This module contains the small string and path helpers used throughout the
Folio codebase.

Key functions:
    slugify: Convert filenames to slugs, dropping a date prefix.
    titleize: Convert filenames to human-readable titles.
    extract_date_from_name: Extract date from filename prefix.
    strip_date_prefix: Remove a YYYY-MM-DD- prefix from a filename stem.
    is_markdown: Check if a path is a Markdown file.
    is_html: Check if a path is a plain HTML file.
    is_hidden_part: Check if a path component is internal or hidden.
    build_tags_index: Build index of documents by tags.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from pathlib import Path

MARKDOWN_SUFFIXES = (".md", ".markdown")


def _split_date_prefix(name: str) -> tuple[list[str], list[str]]:
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return parts[:3], parts[3:]
    return [], parts


def strip_date_prefix(name: str) -> str:
    """Remove a leading YYYY-MM-DD- prefix from a filename stem.

    Args:
        name: Filename stem.

    Returns:
        The stem without its date prefix, or the stem unchanged.
    """
    prefix, rest = _split_date_prefix(name)
    return "-".join(rest) if prefix else name


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = strip_date_prefix(name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("getting-started.md")
        'Getting Started'
    """
    base = strip_date_prefix(Path(filename).stem)
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
        None
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return date(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .markdown extension (case-insensitive).
    """
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def is_html(path: Path) -> bool:
    """Check if a path is a plain HTML file.

    Args:
        path: Path to check.

    Returns:
        True if the file has an .html extension.
    """
    return path.suffix.lower() == ".html"


def is_hidden_part(part: str) -> bool:
    """Check if a path component is internal (``_``) or hidden (``.``)."""
    return part.startswith(("_", "."))


def build_tags_index(documents: Iterable) -> dict[str, list]:
    """Build an index mapping tags to lists of documents containing that tag.

    A document listing the same tag twice is indexed once under it.

    Args:
        documents: Iterable of objects with a 'tags' attribute.

    Returns:
        Dictionary mapping tag names to lists of documents.
    """
    tags: dict[str, list] = {}
    for document in documents:
        for tag in dict.fromkeys(document.tags):
            tags.setdefault(tag, []).append(document)
    return tags
