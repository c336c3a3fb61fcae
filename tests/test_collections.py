from datetime import date
from pathlib import Path

from folio.collections import DocumentCollection, TagCollection


class FakeDocument:
    def __init__(self, title, kind="post", doc_date=None, tags=None, draft=False):
        self.title = title
        self.kind = kind
        self.date = doc_date
        self.tags = tags or []
        self.draft = draft
        self.slug = title.lower()
        self.path = Path(f"{self.slug}.md")

    @property
    def is_post(self):
        return self.kind == "post"


def sample():
    return DocumentCollection(
        [
            FakeDocument("A", doc_date=date(2024, 1, 2), tags=["python"]),
            FakeDocument("B", doc_date=date(2024, 1, 3), tags=["python", "web"], draft=True),
            FakeDocument("About", kind="page"),
            FakeDocument("C", doc_date=date(2024, 1, 2), tags=["web", "web"]),
        ]
    )


def test_document_collection_filters():
    documents = sample()
    assert len(documents) == 4
    assert [d.title for d in documents.posts()] == ["A", "B", "C"]
    assert [d.title for d in documents.pages()] == ["About"]
    assert [d.title for d in documents.drafts()] == ["B"]
    assert [d.title for d in documents.published()] == ["A", "About", "C"]
    assert [d.title for d in documents.with_tag("web")] == ["B", "C"]
    assert documents[0].title == "A"


def test_sorting_newest_first_with_undated_last():
    documents = sample()
    assert [d.title for d in documents.sorted()] == ["B", "C", "A", "About"]
    assert [d.title for d in documents.sorted(reverse=False)] == ["About", "A", "C", "B"]
    assert [d.title for d in documents.latest(2)] == ["B", "C"]


def test_tag_collection_counts_each_document_once():
    tags = sample().tags()
    assert isinstance(tags, TagCollection)
    assert set(tags) == {"python", "web"}
    assert [d.title for d in tags["web"]] == ["B", "C"]
    assert tags.most_common() == [("python", 2), ("web", 2)]
    assert len(tags) == 2
    assert tags.get("missing") is None
