from pathlib import Path

import pytest


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    return _write


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A small Jekyll-style site with posts, a draft, pages and non-content files."""
    _write(tmp_path / "index.html", '---\nlayout: home\ntitle: "Home"\n---\n<h1>Welcome</h1>\n')
    _write(
        tmp_path / "about.md",
        "---\nlayout: page\ntitle: About\nauthor: Jane Doe\n---\n\nAbout me.\n",
    )
    _write(
        tmp_path / "_posts" / "2024-11-11-dotnet-eight.md",
        '---\nlayout: post\ntitle: "X"\ndate: 2024-11-11\ntags: C# .Net8\n---\n\nBody text.\n',
    )
    _write(
        tmp_path / "_posts" / "2023-05-01-first-post.md",
        "---\nlayout: post\ntitle: First Post\ndate: 2023-05-01 09:30:00 +0100\n"
        "tags: [python, web]\ncategories: blog\n---\n\n# First\n\nHello.\n",
    )
    _write(
        tmp_path / "_drafts" / "upcoming.md",
        "---\nlayout: post\ntitle: Upcoming\ntags: python\n---\n\nSoon.\n",
    )
    _write(tmp_path / "_layouts" / "post.html", "---\nlayout: default\n---\n{{ content }}\n")
    _write(tmp_path / "_site" / "index.html", "<html></html>")
    _write(tmp_path / "README.md", "---\ntitle: readme\n---\nNot content\n")
    _write(tmp_path / "notes.md", "Just a file without front matter.\n")
    _write(tmp_path / "assets" / "style.css", "body {}")
    _write(tmp_path / ".git" / "HEAD.md", "---\ntitle: x\n---\n")
    return tmp_path
