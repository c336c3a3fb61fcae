"""Command-line interface for Folio.

This module defines the CLI commands using Click framework.
Every command runs against the project in the current directory.

Commands:
- list: List documents, newest posts first.
- show: Print one document's front matter and body.
- check: Validate every document's front matter.
- tags: Show how often each tag is used.
- new: Create a new post or page interactively.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import ConfigError, load_config
from .documents import PAGE, POST, ContentStore
from .frontmatter import DocumentError
from .markdown import outline, render_markdown
from .utils import slugify, titleize


def _open_store(project_root: Path) -> tuple[ContentStore, dict]:
    try:
        config = load_config(project_root)
    except ConfigError as exc:
        _fail(exc, project_root)
    return ContentStore(project_root, config), config


def _display_path(path: Path | None, project_root: Path) -> str:
    if path is None:
        return ""
    try:
        return str(path.resolve().relative_to(project_root.resolve()))
    except ValueError:
        return str(path)


def _fail(exc: DocumentError | ConfigError, project_root: Path) -> None:
    """Print a user-friendly error and exit with status 1."""
    click.echo(click.style("Error:", fg="red", bold=True), err=True)
    if exc.source_path is not None:
        click.echo(
            click.style(f"  File: {_display_path(exc.source_path, project_root)}", fg="yellow"),
            err=True,
        )
    click.echo(click.style(f"  {exc.message}", fg="white"), err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool):
    """Inspect and validate the content of a static website."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@cli.command(name="list")
@click.option("--posts", "kind", flag_value=POST, help="Only list posts")
@click.option("--pages", "kind", flag_value=PAGE, help="Only list pages")
@click.option("--tag", help="Only list documents with this tag")
@click.option("--drafts", is_flag=True, help="Include draft posts")
def list_documents(kind: str | None, tag: str | None, drafts: bool):
    """List documents, newest first."""
    project_root = Path.cwd()
    store, _ = _open_store(project_root)
    try:
        documents = store.documents(include_drafts=drafts)
    except DocumentError as exc:
        _fail(exc, project_root)
    if kind == POST:
        documents = documents.posts()
    elif kind == PAGE:
        documents = documents.pages()
    if tag:
        documents = documents.with_tag(tag)
    for document in documents.sorted():
        stamp = document.date.isoformat() if document.date else "-" * 10
        label = "draft" if document.draft else document.kind
        title = document.title or titleize(document.path.name)
        click.echo(f"{stamp}  {label:<5}  {document.rel_path}  {title}")


@cli.command()
@click.argument("target")
@click.option("--html", "as_html", is_flag=True, help="Render the body to HTML")
@click.option("--outline", "as_outline", is_flag=True, help="Only print the headings")
def show(target: str, as_html: bool, as_outline: bool):
    """Print a document by path or slug."""
    project_root = Path.cwd()
    store, _ = _open_store(project_root)
    try:
        document = store.get(target)
    except DocumentError as exc:
        _fail(exc, project_root)

    if as_outline:
        for heading in outline(document.body):
            click.echo(f"{'  ' * (heading.level - 1)}{heading.text}")
        return
    if as_html:
        html, _ = render_markdown(document.body)
        click.echo(html, nl=False)
        return

    click.echo("---")
    if document.frontmatter:
        click.echo(
            yaml.safe_dump(document.frontmatter, sort_keys=False, allow_unicode=True),
            nl=False,
        )
    click.echo("---")
    click.echo(document.body, nl=False)


@cli.command()
@click.option("--drafts", is_flag=True, help="Also check draft posts")
@click.option("--strict", is_flag=True, help="Fail on warnings too")
def check(drafts: bool, strict: bool):
    """Validate the front matter of every document."""
    project_root = Path.cwd()
    store, _ = _open_store(project_root)
    try:
        report = store.validate(include_drafts=drafts)
    except DocumentError as exc:
        _fail(exc, project_root)

    for path, issues in report.by_path().items():
        click.echo(click.style(_display_path(path, project_root), fg="yellow"))
        for issue in issues:
            colour = "red" if issue.is_error else "magenta"
            click.echo(
                f"  {click.style(issue.severity, fg=colour)}  {issue.code}: {issue.message}"
            )

    summary = (
        f"Checked {report.checked} documents: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    if report.ok(strict=strict):
        click.echo(click.style(summary, fg="green"))
        return
    click.echo(click.style(summary, fg="red", bold=True), err=True)
    raise SystemExit(1)


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
def tags(drafts: bool):
    """Show each tag and how many documents use it."""
    project_root = Path.cwd()
    store, _ = _open_store(project_root)
    try:
        documents = store.documents(include_drafts=drafts)
    except DocumentError as exc:
        _fail(exc, project_root)
    for tag, count in documents.tags().most_common():
        click.echo(f"{count:>4}  {tag}")


@cli.command()
def new():
    """Create a new post or page interactively."""
    project_root = Path.cwd()
    store, config = _open_store(project_root)
    if not store.content_dir.is_dir():
        raise click.ClickException(
            f"No content directory found at {store.content_dir}. "
            "Run this command from the site root."
        )

    kind = questionary.select(
        "What do you want to write?",
        choices=[POST, PAGE],
        style=_questionary_style(),
    ).ask()
    if kind is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    tag_list: list[str] = []
    if kind == POST:
        answer = questionary.text(
            "Tags (space separated, optional):", style=_questionary_style()
        ).ask()
        if answer is None:
            raise click.Abort()
        tag_list = list(dict.fromkeys(answer.split()))

    slug = slugify(title)
    today = date.today()
    if kind == POST:
        target_dir = store.content_dir / config["posts_dir"]
        filename = f"{today.isoformat()}-{slug}.md"
    else:
        target_dir = store.content_dir
        filename = f"{slug}.md"
    target_path = target_dir / filename

    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {_display_path(target_path, project_root)}"
        )
    existing = _existing_slugs(store, config, kind)
    if slug in existing:
        raise click.ClickException(
            f"A {kind} with slug '{slug}' already exists: {existing[slug]}"
        )

    layout = config["default_layouts"].get(kind, kind)
    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        _render_new_document(layout, title, today if kind == POST else None, tag_list),
        encoding="utf-8",
    )
    click.echo(f"Created {_display_path(target_path, project_root)}")


def _existing_slugs(store: ContentStore, config: dict, kind: str) -> dict[str, str]:
    """Map slug to relative path for existing documents of one kind."""
    post_dirs = {config["posts_dir"], config["drafts_dir"]}
    slugs: dict[str, str] = {}
    for path in store.iter_paths(include_drafts=True):
        rel = path.relative_to(store.content_dir)
        is_post = bool(post_dirs.intersection(rel.parts[:-1]))
        if (kind == POST) == is_post:
            slugs.setdefault(slugify(path.stem), rel.as_posix())
    return slugs


def _render_new_document(
    layout: str, title: str, published: date | None, tag_list: list[str]
) -> str:
    """Build the source text of a new document with its front matter."""
    frontmatter: dict = {"layout": layout, "title": title}
    if published is not None:
        frontmatter["date"] = published
    if tag_list:
        frontmatter["tags"] = " ".join(tag_list)
    block = yaml.safe_dump(
        frontmatter, sort_keys=False, allow_unicode=True, width=float("inf")
    )
    return f"---\n{block}---\n\n# {title}\n"


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
