from datetime import date
from pathlib import Path

import pytest

from folio.content import Post, PostBuilder, PostLoader, UrlDeriver


def create_blog(root: Path) -> Path:
    posts = root / "posts"
    posts.mkdir(parents=True)
    (posts / "hello.md").write_text(
        "---\ntitle: Hello\ndate: 2023-05-01\ntags: [intro]\n---\nFirst post.", encoding="utf-8"
    )
    (posts / "2023-06-01-second.md").write_text("# Second\n\nMore.", encoding="utf-8")
    (posts / "_draft.md").write_text("---\ntitle: WIP\n---\n", encoding="utf-8")
    (posts / "notes.txt").write_text("ignore", encoding="utf-8")
    (posts / "README.md").write_text("# Readme", encoding="utf-8")
    (posts / "nested").mkdir()
    (posts / "nested" / "deep.md").write_text("# Deep", encoding="utf-8")
    (root / "about.md").write_text("# About", encoding="utf-8")
    return posts


def test_loader_finds_top_level_markdown(tmp_path):
    create_blog(tmp_path)
    loader = PostLoader(tmp_path, "posts", exclude=["posts/README.md"])
    names = [p.name for p in loader.iter_files()]
    assert names == ["2023-06-01-second.md", "hello.md"]

    with_drafts = [p.name for p in loader.iter_files(include_drafts=True)]
    assert with_drafts == ["2023-06-01-second.md", "_draft.md", "hello.md"]


def test_loader_excludes_names_relative_to_posts_dir(tmp_path):
    create_blog(tmp_path)
    loader = PostLoader(tmp_path, "posts", exclude=["README.md", "hello.md"])
    assert [p.name for p in loader.iter_files()] == ["2023-06-01-second.md"]


def test_loader_missing_directory(tmp_path):
    assert PostLoader(tmp_path, "posts").iter_files() == []


def test_url_deriver_maps_markdown_to_html(tmp_path):
    deriver = UrlDeriver(tmp_path)
    assert deriver.derive(tmp_path / "posts" / "hello.md") == "/posts/hello.html"
    assert deriver.derive(tmp_path / "posts" / "Shout.MD") == "/posts/Shout.html"


def test_builder_creates_post(tmp_path):
    posts = create_blog(tmp_path)
    post = PostBuilder(tmp_path).build(posts / "hello.md")
    assert post.url == "/posts/hello.html"
    assert post.date == date(2023, 5, 1)
    assert post.year == 2023
    assert post.title == "Hello"
    assert post.tags == ["intro"]
    assert post.slug == "hello"
    assert post.draft is False
    assert post.frontmatter == {"title": "Hello", "date": "2023-05-01", "tags": ["intro"]}
    assert post.to_index_entry() == {
        "frontMatter": post.frontmatter,
        "regularPath": "/posts/hello.html",
    }


def test_builder_uses_filename_date_and_heading(tmp_path):
    posts = create_blog(tmp_path)
    post = PostBuilder(tmp_path).build(posts / "2023-06-01-second.md")
    assert post.date == date(2023, 6, 1)
    assert post.title == "Second"
    assert post.slug == "second"
    assert post.frontmatter == {"date": "2023-06-01"}
    assert post.description == "More."


def test_builder_rejects_impossible_date(tmp_path):
    path = tmp_path / "posts" / "bad.md"
    path.parent.mkdir()
    path.write_text("---\ndate: 2023-02-30\n---\n", encoding="utf-8")
    with pytest.raises(ValueError):
        PostBuilder(tmp_path).build(path)


def test_post_defaults():
    post = Post(path=Path("posts/x.md"), url="/posts/x.html", date=date(2020, 1, 1), title="X")
    assert post.tags == []
    assert post.to_index_entry()["frontMatter"] == {}
