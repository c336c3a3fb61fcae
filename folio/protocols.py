"""Protocol definitions for Folio.

This module defines the interfaces (protocols) the content store depends on,
so that file discovery, document construction and validation rules can be
swapped independently (for example with in-memory fakes in tests).
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .documents import Document
    from .validation import Issue


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files.

    This separates file discovery from document construction.
    """

    @abstractmethod
    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """Return every content file, in a stable order.

        Args:
            include_drafts: Whether to include unpublished drafts.

        Returns:
            List of paths to content files.
        """
        ...


@runtime_checkable
class DocumentBuilder(Protocol):
    """Protocol for building Document records from source files."""

    @abstractmethod
    def build(self, path: Path) -> Document:
        """Read a source file and return its Document.

        Args:
            path: Path to the source file.

        Returns:
            Document record.

        Raises:
            FrontMatterError: If the front matter cannot be parsed.
        """
        ...


@runtime_checkable
class ValidationRule(Protocol):
    """Protocol for a single document check.

    Each rule reports one kind of problem under its own ``code``.
    """

    code: str

    @abstractmethod
    def check(self, document: Document) -> Iterable[Issue]:
        """Yield the issues this rule finds in the document."""
        ...
