from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date
from typing import TYPE_CHECKING

from .utils import build_tags_index

if TYPE_CHECKING:
    from .documents import Document


class DocumentCollection(Sequence["Document"]):
    """Lightweight helper for filtering and ordering lists of Documents."""

    def __init__(self, documents: Iterable[Document]):
        self._documents = list(documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, item):
        return self._documents[item]

    def posts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.is_post)

    def pages(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if not d.is_post)

    def with_tag(self, tag: str) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if tag in d.tags)

    def drafts(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if d.draft)

    def published(self) -> DocumentCollection:
        return DocumentCollection(d for d in self._documents if not d.draft)

    def sorted(self, reverse: bool = True) -> DocumentCollection:
        """Sort documents by date, then by slug.

        Undated documents sort as the oldest.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new DocumentCollection with sorted documents.
        """

        def sort_key(d: Document):
            return (d.date or date.min, d.slug)

        return DocumentCollection(sorted(self._documents, key=sort_key, reverse=reverse))

    def latest(self, count: int = 5) -> DocumentCollection:
        return DocumentCollection(self.sorted()[:count])

    def tags(self) -> TagCollection:
        return TagCollection(build_tags_index(self._documents))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"DocumentCollection({len(self._documents)} documents)"


class TagCollection(Mapping[str, DocumentCollection]):
    """Mapping of tag name to DocumentCollection with convenience helpers."""

    def __init__(self, mapping: dict[str, Iterable[Document]]):
        self._mapping = {k: DocumentCollection(v) for k, v in mapping.items()}

    def __getitem__(self, key: str) -> DocumentCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def most_common(self) -> list[tuple[str, int]]:
        """Tags with their document counts, most used first, then by name."""
        counts = [(tag, len(docs)) for tag, docs in self._mapping.items()]
        return sorted(counts, key=lambda item: (-item[1], item[0]))

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"
