"""Content store for Folio.

This module enumerates the documents of a site source tree and reads their
metadata and body. Documents are never written or cached: every call reads
from disk again.

Key classes:
- Document: Dataclass representing one post or page.
- FileContentLoader: Implementation of ContentLoader for a directory tree.
- DefaultDocumentBuilder: Implementation of DocumentBuilder.
- ContentStore: Facade for enumerating, reading and validating documents.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .collections import DocumentCollection
from .config import DEFAULT_CONFIG
from .frontmatter import (
    DocumentError,
    has_frontmatter,
    parse_date,
    parse_tags,
    split_frontmatter,
)
from .utils import extract_date_from_name, is_hidden_part, is_html, is_markdown, slugify
from .validation import DocumentValidator, ValidationReport, default_validator

if TYPE_CHECKING:
    from .protocols import ContentLoader, DocumentBuilder

logger = logging.getLogger(__name__)

POST = "post"
PAGE = "page"


class DocumentNotFoundError(DocumentError):
    """No document matches the requested path or slug."""


class AmbiguousDocumentError(DocumentError):
    """A slug matches more than one document.

    Attributes:
        candidates: Relative paths of every matching document.
    """

    def __init__(self, target: str, candidates: list[str]):
        self.candidates = candidates
        super().__init__(
            None, f"'{target}' matches several documents: {', '.join(candidates)}"
        )


@dataclass
class Document:
    """A single post or page with its metadata and body.

    Attributes:
        layout: Name of the rendering template, as written in the front matter.
        title: Document title.
        date: Publication date (posts).
        tags: Tags in order of appearance, duplicates included.
        author: Optional author name.
        body: Markdown text following the front matter.
        path: Path to the source file.
        rel_path: Source path relative to the content directory, POSIX style.
        slug: File stem without date prefix.
        kind: "post" or "page".
        draft: Whether the document lives in the drafts directory.
        categories: Jekyll-style categories, normalised like tags.
        frontmatter: Every front matter key, including unmodelled ones.
    """

    layout: str | None
    title: str | None
    date: date | None
    tags: list[str]
    author: str | None
    body: str
    path: Path
    rel_path: str
    slug: str
    kind: str
    draft: bool = False
    categories: list[str] = field(default_factory=list)
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def is_post(self) -> bool:
        return self.kind == POST

    @property
    def filename_date(self) -> date | None:
        """Date encoded in a ``YYYY-MM-DD-`` filename prefix, if any."""
        return extract_date_from_name(self.path.stem)


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    return str(value)


class FileContentLoader:
    """Discovers content files under a directory.

    Files under the posts directory (and the drafts directory, on request)
    are always content. Other Markdown/HTML files only count when they open
    with a front matter block; anything else is a static file for the
    renderer to copy and is skipped here.

    Attributes:
        content_dir: Directory containing site content.
        posts_dir: Name of the posts directory.
        drafts_dir: Name of the drafts directory.
        exclude: Relative paths to skip entirely.
    """

    def __init__(
        self,
        content_dir: Path,
        posts_dir: str = "_posts",
        drafts_dir: str = "_drafts",
        exclude: list[str] | None = None,
    ):
        self.content_dir = content_dir
        self.posts_dir = posts_dir
        self.drafts_dir = drafts_dir
        self.exclude = [e.strip("/") for e in (exclude or [])]

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """Return all content files sorted by relative path.

        Excluded and hidden directories are pruned during the walk, so trees
        such as ``.git`` or ``node_modules`` are never entered.

        Args:
            include_drafts: Whether to include files in the drafts directory.

        Returns:
            List of paths to content files.
        """
        if not self.content_dir.is_dir():
            raise DocumentError(self.content_dir, "Content directory does not exist")
        allowed = {self.posts_dir}
        if include_drafts:
            allowed.add(self.drafts_dir)

        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.content_dir):
            rel_dir = Path(dirpath).relative_to(self.content_dir)
            dirnames[:] = [
                d for d in dirnames if self._enters(rel_dir / d, d, allowed, include_drafts)
            ]
            folders = rel_dir.parts
            for name in filenames:
                path = Path(dirpath) / name
                rel = rel_dir / name
                if self._is_excluded(rel):
                    continue
                if not (is_markdown(path) or is_html(path)):
                    continue
                if self.drafts_dir in folders or self.posts_dir in folders:
                    files.append(path)
                elif self._opens_with_frontmatter(path):
                    files.append(path)
                else:
                    logger.debug("Skipping %s: no front matter", rel.as_posix())
        return sorted(files)

    def _enters(self, rel: Path, name: str, allowed: set[str], include_drafts: bool) -> bool:
        if self._is_excluded(rel):
            return False
        if name == self.drafts_dir:
            return include_drafts
        return not is_hidden_part(name) or name in allowed

    def _opens_with_frontmatter(self, path: Path) -> bool:
        try:
            return has_frontmatter(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError:
            logger.debug("Skipping %s: not UTF-8 text", path)
            return False
        except OSError as exc:
            logger.debug("Skipping %s: %s", path, exc)
            return False

    def _is_excluded(self, rel: Path) -> bool:
        posix = rel.as_posix()
        return any(posix == e or posix.startswith(f"{e}/") for e in self.exclude)


class DefaultDocumentBuilder:
    """Builds Document records from source files.

    Attributes:
        content_dir: Directory containing site content.
        posts_dir: Name of the posts directory.
        drafts_dir: Name of the drafts directory.
    """

    def __init__(
        self, content_dir: Path, posts_dir: str = "_posts", drafts_dir: str = "_drafts"
    ):
        self.content_dir = content_dir
        self.posts_dir = posts_dir
        self.drafts_dir = drafts_dir

    def build(self, path: Path) -> Document:
        """Build a Document from a source file.

        Args:
            path: Path to the source file.

        Returns:
            Document record.

        Raises:
            FrontMatterError: If the front matter is not a YAML mapping.
            DocumentError: If the file cannot be read as UTF-8 text.
        """
        rel = path.relative_to(self.content_dir)
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentError(path, "File is not valid UTF-8 text", exc) from exc
        except OSError as exc:
            raise DocumentError(path, f"Cannot read file: {exc.strerror or exc}", exc) from exc
        frontmatter, body = split_frontmatter(raw, path)

        folders = rel.parts[:-1]
        draft = self.drafts_dir in folders
        kind = POST if draft or self.posts_dir in folders else PAGE

        return Document(
            layout=_text(frontmatter.get("layout")),
            title=_text(frontmatter.get("title")),
            date=parse_date(frontmatter.get("date")),
            tags=parse_tags(frontmatter.get("tags")),
            author=_text(frontmatter.get("author")),
            body=body,
            path=path,
            rel_path=rel.as_posix(),
            slug=slugify(path.stem),
            kind=kind,
            draft=draft,
            categories=parse_tags(frontmatter.get("categories")),
            frontmatter=frontmatter,
        )


class ContentStore:
    """Facade for enumerating and reading the documents of a site.

    Attributes:
        project_root: Root directory of the project.
        content_dir: Directory holding the content, from ``content_dir``.
    """

    def __init__(
        self,
        project_root: Path,
        config: dict[str, Any] | None = None,
        content_loader: ContentLoader | None = None,
        document_builder: DocumentBuilder | None = None,
        validator: DocumentValidator | None = None,
    ):
        """Initialize the store.

        Args:
            project_root: Root directory of the project.
            config: Settings as returned by ``load_config``; defaults if None.
            content_loader: Optional custom content loader.
            document_builder: Optional custom document builder.
            validator: Optional custom validator.
        """
        settings = dict(DEFAULT_CONFIG)
        settings.update(config or {})
        self.project_root = project_root
        self.content_dir = (project_root / settings["content_dir"]).resolve()
        posts_dir = settings["posts_dir"]
        drafts_dir = settings["drafts_dir"]
        self._content_loader = content_loader or FileContentLoader(
            self.content_dir, posts_dir, drafts_dir, settings["exclude"]
        )
        self._document_builder = document_builder or DefaultDocumentBuilder(
            self.content_dir, posts_dir, drafts_dir
        )
        self._validator = validator or default_validator

    def iter_paths(self, include_drafts: bool = False) -> list[Path]:
        """Enumerate the source files of every document."""
        return self._content_loader.iter_files(include_drafts)

    def read(self, path: Path) -> Document:
        """Read a single source file into a Document."""
        return self._document_builder.build(path)

    def documents(self, include_drafts: bool = False) -> DocumentCollection:
        """Read every document without validating it.

        Raises:
            FrontMatterError: If any file has malformed front matter.
        """
        return DocumentCollection(self.read(p) for p in self.iter_paths(include_drafts))

    def get(self, target: str) -> Document:
        """Read one document by relative path or slug.

        Args:
            target: Path relative to the content directory (``about.md``,
                ``_posts/2024-11-11-hello.md``) or a slug (``hello``).

        Raises:
            DocumentNotFoundError: If nothing matches.
            AmbiguousDocumentError: If a slug matches several documents.
        """
        paths = self.iter_paths(include_drafts=True)
        wanted = target.strip().strip("/")
        for path in paths:
            if path.relative_to(self.content_dir).as_posix() == wanted:
                return self.read(path)

        slug = slugify(Path(wanted).stem)
        matches = [p for p in paths if slugify(p.stem) == slug]
        if not matches:
            raise DocumentNotFoundError(None, f"No document matches '{target}'")
        if len(matches) > 1:
            raise AmbiguousDocumentError(
                target, [p.relative_to(self.content_dir).as_posix() for p in matches]
            )
        logger.debug("Resolved '%s' to %s by slug", target, matches[0])
        return self.read(matches[0])

    def validate(self, include_drafts: bool = False) -> ValidationReport:
        """Check every document and collect the issues without raising."""
        return ValidationReport.collect(
            self.iter_paths(include_drafts), self.read, self._validator
        )

    def load(self, include_drafts: bool = False, strict: bool = False) -> DocumentCollection:
        """Read every document, rejecting any that breaks the conventions.

        Args:
            include_drafts: Whether to include drafts.
            strict: Whether warnings also reject a document.

        Returns:
            Collection of valid documents.

        Raises:
            FrontMatterError: If a file has malformed front matter.
            InvalidDocumentError: On the first document with issues.
        """
        documents = []
        for path in self.iter_paths(include_drafts):
            document = self.read(path)
            self._validator.ensure_valid(document, strict=strict)
            documents.append(document)
        return DocumentCollection(documents)
