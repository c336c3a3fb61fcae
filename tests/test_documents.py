from datetime import date
from pathlib import Path

import pytest

from folio import documents as documents_module
from folio.config import load_config
from folio.documents import (
    AmbiguousDocumentError,
    ContentStore,
    DefaultDocumentBuilder,
    Document,
    DocumentNotFoundError,
    FileContentLoader,
)
from folio.frontmatter import DocumentError, FrontMatterError
from folio.protocols import ContentLoader, DocumentBuilder
from folio.validation import InvalidDocumentError


def rel_paths(store, **kwargs):
    return [p.relative_to(store.content_dir).as_posix() for p in store.iter_paths(**kwargs)]


def test_iter_paths_skips_internal_and_static_files(site):
    store = ContentStore(site)
    assert rel_paths(store) == [
        "_posts/2023-05-01-first-post.md",
        "_posts/2024-11-11-dotnet-eight.md",
        "about.md",
        "index.html",
    ]
    assert "_drafts/upcoming.md" in rel_paths(store, include_drafts=True)


def test_post_front_matter_parses_to_record(site):
    store = ContentStore(site)
    post = store.get("_posts/2024-11-11-dotnet-eight.md")
    assert isinstance(post, Document)
    assert post.layout == "post"
    assert post.title == "X"
    assert post.date == date(2024, 11, 11)
    assert set(post.tags) == {"C#", ".Net8"}
    assert len(post.tags) == 2
    assert post.body.strip() == "Body text."
    assert post.kind == "post"
    assert post.is_post
    assert not post.draft
    assert post.slug == "dotnet-eight"
    assert post.filename_date == date(2024, 11, 11)
    assert post.author is None


def test_pages_and_extra_metadata(site):
    documents = ContentStore(site).documents()
    about = next(d for d in documents if d.rel_path == "about.md")
    assert about.kind == "page"
    assert about.author == "Jane Doe"
    assert about.date is None
    assert about.tags == []

    first = next(d for d in documents if d.slug == "first-post")
    assert first.date == date(2023, 5, 1)
    assert first.tags == ["python", "web"]
    assert first.categories == ["blog"]
    assert first.frontmatter["date"] == "2023-05-01 09:30:00 +0100"


def test_get_by_slug_and_missing(site):
    store = ContentStore(site)
    assert store.get("about").rel_path == "about.md"
    assert store.get("dotnet-eight").title == "X"
    assert store.get("/about.md").title == "About"

    draft = store.get("upcoming")
    assert draft.draft
    assert draft.kind == "post"
    assert draft.date is None

    with pytest.raises(DocumentNotFoundError, match="nothing-here"):
        store.get("nothing-here")


def test_get_ambiguous_slug(site, write_file):
    write_file(site / "x.md", "---\nlayout: page\ntitle: X page\n---\nPage\n")
    write_file(site / "_posts" / "2024-01-01-x.md", "---\nlayout: post\ntitle: X\n---\nPost\n")
    with pytest.raises(AmbiguousDocumentError) as excinfo:
        ContentStore(site).get("x")
    assert excinfo.value.candidates == ["_posts/2024-01-01-x.md", "x.md"]


def test_load_accepts_valid_site(site):
    documents = ContentStore(site).load(include_drafts=True)
    assert len(documents) == 5
    assert len(documents.posts()) == 3
    assert len(documents.drafts()) == 1


def test_load_rejects_missing_title(site, write_file):
    path = write_file(
        site / "_posts" / "2024-02-02-untitled.md",
        "---\nlayout: post\ndate: 2024-02-02\n---\n\nText\n",
    )
    with pytest.raises(InvalidDocumentError) as excinfo:
        ContentStore(site).load()
    assert excinfo.value.source_path.name == path.name
    assert [i.code for i in excinfo.value.issues] == ["missing-title"]
    # Reading without validation still works
    assert len(ContentStore(site).documents()) == 5


def test_load_strict_rejects_warnings(site, write_file):
    write_file(
        site / "_posts" / "2024-03-03-late.md",
        "---\nlayout: post\ntitle: Late\ndate: 2024-03-04\n---\n\nText\n",
    )
    assert len(ContentStore(site).load()) == 5
    with pytest.raises(InvalidDocumentError) as excinfo:
        ContentStore(site).load(strict=True)
    assert excinfo.value.issues[0].code == "date-mismatch"


def test_malformed_front_matter(site, write_file):
    write_file(site / "broken.md", "---\ntitle: [oops\n---\nBody\n")
    store = ContentStore(site)
    with pytest.raises(FrontMatterError):
        store.documents()

    report = store.validate()
    assert not report.ok()
    assert [i.code for i in report.errors] == ["invalid-frontmatter"]
    assert report.checked == 5


def test_config_moves_content_and_excludes(tmp_path, write_file):
    write_file(tmp_path / "folio.yaml", "content_dir: site\nexclude: [old]\nposts_dir: posts\n")
    write_file(tmp_path / "site" / "posts" / "2024-01-01-a.md", "---\nlayout: post\ntitle: A\n---\nA\n")
    write_file(tmp_path / "site" / "old" / "b.md", "---\nlayout: page\ntitle: B\n---\nB\n")
    write_file(tmp_path / "site" / "c.md", "---\nlayout: page\ntitle: C\n---\nC\n")
    store = ContentStore(tmp_path, load_config(tmp_path))
    assert rel_paths(store) == ["c.md", "posts/2024-01-01-a.md"]
    assert store.get("a").is_post


def test_missing_content_dir(tmp_path):
    store = ContentStore(tmp_path / "nope")
    with pytest.raises(DocumentError, match="does not exist"):
        store.iter_paths()


def test_store_accepts_custom_components(tmp_path, write_file):
    path = write_file(tmp_path / "only.md", "---\nlayout: page\ntitle: Only\n---\nText\n")

    class SingleFileLoader:
        def iter_files(self, include_drafts=False):
            return [path]

    loader = SingleFileLoader()
    builder = DefaultDocumentBuilder(tmp_path)
    assert isinstance(loader, ContentLoader)
    assert isinstance(builder, DocumentBuilder)
    assert isinstance(FileContentLoader(tmp_path), ContentLoader)

    store = ContentStore(tmp_path, content_loader=loader, document_builder=builder)
    assert [d.title for d in store.load()] == ["Only"]


def test_non_utf8_files(site):
    (site / "legacy.html").write_bytes(b"---\ntitle: caf\xe9\n---\n")
    (site / "_posts" / "2024-04-04-latin.md").write_bytes(b"---\ntitle: caf\xe9\n---\n")
    store = ContentStore(site)
    assert "legacy.html" not in rel_paths(store)

    report = store.validate()
    assert [(i.path.name, i.code) for i in report.errors] == [
        ("2024-04-04-latin.md", "unreadable")
    ]


def test_drafts_dir_without_underscore(tmp_path, write_file):
    write_file(tmp_path / "folio.yaml", "drafts_dir: drafts\n")
    write_file(tmp_path / "drafts" / "idea.md", "---\nlayout: post\ntitle: Idea\n---\nIdea\n")
    store = ContentStore(tmp_path, load_config(tmp_path))
    assert rel_paths(store) == []
    assert rel_paths(store, include_drafts=True) == ["drafts/idea.md"]
    assert store.get("idea").draft


def test_walk_prunes_excluded_and_hidden_dirs(site, write_file, monkeypatch):
    write_file(site / "node_modules" / "pkg" / "README.md", "---\ntitle: pkg\n---\n")
    root = site.resolve()
    visited = []
    real_walk = documents_module.os.walk

    def recording_walk(top, *args, **kwargs):
        for entry in real_walk(top, *args, **kwargs):
            visited.append(Path(entry[0]).relative_to(root).as_posix())
            yield entry

    monkeypatch.setattr(documents_module.os, "walk", recording_walk)
    store = ContentStore(site)
    assert rel_paths(store) == [
        "_posts/2023-05-01-first-post.md",
        "_posts/2024-11-11-dotnet-eight.md",
        "about.md",
        "index.html",
    ]
    assert sorted(visited) == [".", "_posts", "assets"]


def test_unreadable_file_is_reported(site, monkeypatch):
    blocked = site.resolve() / "_posts" / "2024-11-11-dotnet-eight.md"
    real_read_text = Path.read_text

    def read_text(self, *args, **kwargs):
        if self == blocked or self.name == "about.md":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", read_text)
    store = ContentStore(site)
    assert "about.md" not in rel_paths(store)

    report = store.validate()
    assert [(i.path, i.code, i.message) for i in report.errors] == [
        (blocked, "unreadable", "Cannot read file: Permission denied")
    ]
    with pytest.raises(DocumentError, match="Permission denied"):
        store.read(blocked)
