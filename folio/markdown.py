"""Markdown preview for Folio.

Renders a document body to HTML and collects its headings, so a document can
be inspected from the command line. This is a preview only: layouts,
includes and site-level URLs are left to the external renderer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import mistune


@dataclass
class Heading:
    """Represents a heading extracted from markdown content.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _OutlineRenderer(mistune.HTMLRenderer):
    """HTML renderer that gives headings unique ids and records them.

    Attributes:
        headings: Heading objects in document order.
    """

    def __init__(self):
        super().__init__(escape=False)
        self.headings: list[Heading] = []
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        base_id = _generate_heading_id(text) or "section"

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        self.headings.append(Heading(id=heading_id, text=text, level=level))
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'


def render_markdown(body: str) -> tuple[str, list[Heading]]:
    """Render a markdown body to HTML.

    Args:
        body: Markdown source, without front matter.

    Returns:
        Tuple of (rendered HTML, list of Heading objects).
    """
    renderer = _OutlineRenderer()
    markdown = mistune.create_markdown(
        renderer=renderer, plugins=["strikethrough", "footnotes", "table", "url"]
    )
    html = markdown(body)
    return html, renderer.headings


def outline(body: str) -> list[Heading]:
    """Return the headings of a markdown body in document order."""
    return render_markdown(body)[1]
