"""Front matter conventions and the validating loader.

Each rule checks one convention and reports problems as ``Issue`` records.
Errors mean the external renderer would mis-handle the document; warnings
flag conventions the site follows but nothing enforces.

Key classes:
- Issue: One problem found in one file.
- ValidationReport: Every issue found across a set of files.
- DocumentValidator: Runs a list of rules over a document.
- InvalidDocumentError: Raised by the validating loader.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .frontmatter import DocumentError, FrontMatterError, parse_date

if TYPE_CHECKING:
    from .documents import Document
    from .protocols import ValidationRule

logger = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Issue:
    """A single problem found in a source file.

    Attributes:
        path: Path to the offending file.
        code: Short identifier of the rule, e.g. ``missing-title``.
        message: Human-readable description.
        severity: ``error`` or ``warning``.
    """

    path: Path
    code: str
    message: str
    severity: str = ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR


class InvalidDocumentError(DocumentError):
    """A document was rejected by the validating loader.

    Attributes:
        issues: Every issue found in the document.
    """

    def __init__(self, source_path: Path, issues: list[Issue]):
        self.issues = issues
        summary = "; ".join(issue.message for issue in issues)
        super().__init__(source_path, summary)


class RequiredFieldRule:
    """Every document needs a non-empty value for ``field_name``."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        self.code = f"missing-{field_name}"

    def check(self, document: Document) -> Iterator[Issue]:
        value = getattr(document, self.field_name)
        if value is None or not value.strip():
            yield Issue(
                document.path,
                self.code,
                f"Missing required front matter field '{self.field_name}'",
            )


class PostDateRule:
    """Published posts carry a ``date`` that parses as a calendar date."""

    code = "missing-date"

    def check(self, document: Document) -> Iterator[Issue]:
        raw = document.frontmatter.get("date")
        if raw is None or raw == "":
            if document.is_post and not document.draft:
                yield Issue(document.path, self.code, "Posts require a 'date' field")
            return
        if parse_date(raw) is None:
            yield Issue(
                document.path, "invalid-date", f"'date' is not a valid date: {raw!r}"
            )


class BodyRule:
    """The body after the front matter contains some text."""

    code = "empty-body"

    def check(self, document: Document) -> Iterator[Issue]:
        if not document.body.strip():
            yield Issue(document.path, self.code, "Document body is empty")


class DuplicateTagRule:
    """Tag lists name each tag once (case-sensitive)."""

    code = "duplicate-tag"

    def check(self, document: Document) -> Iterator[Issue]:
        seen: set[str] = set()
        reported: set[str] = set()
        for tag in document.tags:
            if tag in seen and tag not in reported:
                reported.add(tag)
                yield Issue(document.path, self.code, f"Duplicate tag '{tag}'")
            seen.add(tag)


class FilenameDateRule:
    """Post filenames start with ``YYYY-MM-DD-`` matching the front matter date."""

    code = "date-mismatch"

    def check(self, document: Document) -> Iterator[Issue]:
        if not document.is_post or document.draft:
            return
        from_name = document.filename_date
        if from_name is None:
            yield Issue(
                document.path,
                "filename-date",
                "Post filename should start with a YYYY-MM-DD- date",
                WARNING,
            )
            return
        if document.date is not None and document.date != from_name:
            yield Issue(
                document.path,
                self.code,
                f"Filename date {from_name.isoformat()} differs from "
                f"front matter date {document.date.isoformat()}",
                WARNING,
            )


def default_rules() -> list[ValidationRule]:
    return [
        RequiredFieldRule("layout"),
        RequiredFieldRule("title"),
        PostDateRule(),
        BodyRule(),
        DuplicateTagRule(),
        FilenameDateRule(),
    ]


class DocumentValidator:
    """Runs validation rules over documents.

    Rules are run in order and their issues concatenated, so new checks can
    be added without touching the existing ones.
    """

    def __init__(self, rules: list[ValidationRule] | None = None):
        self._rules = default_rules() if rules is None else list(rules)

    def add_rule(self, rule: ValidationRule) -> None:
        self._rules.append(rule)

    def validate(self, document: Document) -> list[Issue]:
        """Return every issue found in the document."""
        issues: list[Issue] = []
        for rule in self._rules:
            issues.extend(rule.check(document))
        return issues

    def ensure_valid(self, document: Document, strict: bool = False) -> Document:
        """Return the document, or raise if it breaks a convention.

        Args:
            document: Document to check.
            strict: Whether warnings also reject the document.

        Raises:
            InvalidDocumentError: Listing every blocking issue.
        """
        issues = self.validate(document)
        for issue in issues:
            if not issue.is_error:
                logger.warning("%s: %s", document.rel_path, issue.message)
        blocking = [i for i in issues if strict or i.is_error]
        if blocking:
            raise InvalidDocumentError(document.path, blocking)
        return document


default_validator = DocumentValidator()


@dataclass
class ValidationReport:
    """Issues found across a set of files.

    Attributes:
        checked: Number of files inspected.
        issues: Every issue, in file order.
    """

    checked: int = 0
    issues: list[Issue] = field(default_factory=list)

    @classmethod
    def collect(
        cls,
        paths: Iterable[Path],
        read: Callable[[Path], Document],
        validator: DocumentValidator,
    ) -> ValidationReport:
        """Read and validate each path, recording unreadable files as issues."""
        report = cls()
        for path in paths:
            report.checked += 1
            try:
                document = read(path)
            except DocumentError as exc:
                if isinstance(exc, FrontMatterError):
                    code = "invalid-frontmatter"
                else:
                    code = "unreadable"
                report.issues.append(Issue(path, code, exc.message))
                continue
            report.issues.extend(validator.validate(document))
        return report

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if not i.is_error]

    def ok(self, strict: bool = False) -> bool:
        """Whether the files pass; ``strict`` also fails on warnings."""
        return not (self.issues if strict else self.errors)

    def by_path(self) -> dict[Path, list[Issue]]:
        grouped: dict[Path, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.path, []).append(issue)
        return grouped
