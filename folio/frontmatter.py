"""Front matter parsing for Folio.

A document starts with a YAML block delimited by ``---`` lines, followed by
its markdown body. This module splits the two and normalises the values the
rest of Folio models (dates, tag lists).

Key functions:
- split_frontmatter: Separate the YAML block from the body.
- has_frontmatter: Check whether text opens with a front matter block.
- parse_date: Coerce a front matter date value to ``datetime.date``.
- parse_tags: Coerce a tag/category value to a list of strings.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S %z",
)

TEXT_KEYS = ("tags", "categories")


class DocumentError(Exception):
    """Error reading a document, with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}" if source_path else message)


class FrontMatterError(DocumentError):
    """The front matter block is not a valid YAML mapping."""


class _FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps ``tags`` and ``categories`` scalars as written.

    Without this ``tags: 1.10`` would load as the float 1.1 and ``tags: yes``
    as True.
    """

    def construct_document(self, node):
        if isinstance(node, yaml.MappingNode):
            for key_node, value_node in node.value:
                if isinstance(key_node, yaml.ScalarNode) and key_node.value in TEXT_KEYS:
                    _keep_as_text(value_node)
        return super().construct_document(node)


def _keep_as_text(node: yaml.Node) -> None:
    items = node.value if isinstance(node, yaml.SequenceNode) else [node]
    for item in items:
        if isinstance(item, yaml.ScalarNode):
            item.tag = "tag:yaml.org,2002:str"


def _strip_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text


def has_frontmatter(text: str) -> bool:
    """Return True if text opens with a ``---`` delimited block."""
    return FRONTMATTER_RE.match(_strip_bom(text)) is not None


def split_frontmatter(
    text: str, path: Path | None = None
) -> tuple[dict[str, Any], str]:
    """Extract YAML front matter from content.

    Args:
        text: Raw file content.
        path: Source file, used for error reporting only.

    Returns:
        Tuple of (front matter dict, remaining body). Text without a block
        yields an empty dict and the text unchanged.

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping.
    """
    text = _strip_bom(text)
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.load(match.group(1), Loader=_FrontMatterLoader)
    except (yaml.YAMLError, ValueError) as exc:
        # PyYAML raises ValueError for timestamps such as 2024-13-45
        raise FrontMatterError(path, f"Invalid YAML front matter: {exc}", exc) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            path, f"Front matter must be a mapping, got {type(data).__name__}"
        )
    return data, text[match.end() :]


def parse_date(value: Any) -> date | None:
    """Coerce a front matter ``date`` value to a calendar date.

    YAML already turns ``2024-11-11`` into a ``date`` and full timestamps into
    a ``datetime``; strings it leaves alone (for example a ``+0100`` offset
    without a colon) are tried against ``DATE_FORMATS``.

    Returns:
        The date, or None if the value is missing or does not parse.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    raw = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def parse_tags(value: Any) -> list[str]:
    """Coerce a ``tags``/``categories`` value to a list of strings.

    Strings are split on whitespace (``tags: C# .Net8``), lists keep their
    order. Duplicates are kept so that validation can report them. Values
    loaded by ``split_frontmatter`` are already text; other scalars only
    arrive from callers building front matter by hand.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value)]
