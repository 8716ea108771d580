"""Unit tests for core/index.py"""

import pytest

from mdsite.core.errors import DuplicateSlugError, OutputCollisionError
from mdsite.core.index import build_index


def test_documents_sorted_newest_first_undated_last(make_doc):
    """Dated documents come newest first; undated ones follow, ordered by path."""
    docs = [
        make_doc("z.md"),
        make_doc("old.md", date="2024-05-01"),
        make_doc("a.md"),
        make_doc("new.md", date="2025-02-01"),
        make_doc("mid.md", date="2025-01-01"),
    ]
    index = build_index(docs)
    assert [d.path for d in index.documents] == ["new.md", "mid.md", "old.md", "a.md", "z.md"]
    assert [d.path for d in index.posts] == ["new.md", "mid.md", "old.md"]


def test_same_date_tie_broken_by_path(make_doc):
    """Documents sharing a date are ordered by source path."""
    docs = [make_doc("b.md", date="2025-01-01"), make_doc("a.md", date="2025-01-01")]
    assert [d.path for d in build_index(docs).documents] == ["a.md", "b.md"]


def test_order_independent_of_input_order(make_doc):
    """The index is the same whatever order documents arrive in."""
    docs = [make_doc(f"p{i}.md", date=f"2025-01-0{i % 3 + 1}") for i in range(6)]
    forward = build_index(docs)
    backward = build_index(list(reversed(docs)))
    assert forward.documents == backward.documents


def test_tag_mapping(make_doc):
    """Each tag maps to every document carrying it, in index order."""
    a = make_doc("a.md", date="2025-01-01", tags=["rust"])
    b = make_doc("b.md", date="2025-02-01", tags=["rust", "intro"])
    index = build_index([a, b])
    assert [d.path for d in index.tags["rust"]] == ["b.md", "a.md"]
    assert [d.path for d in index.tags["intro"]] == ["b.md"]
    assert list(index.tags) == ["intro", "rust"]


def test_index_is_read_only(make_doc):
    """Mappings exposed by the index cannot be modified."""
    index = build_index([make_doc("a.md", tags=["x"])])
    with pytest.raises(TypeError):
        index.tags["y"] = ()
    with pytest.raises(AttributeError):
        index.posts = ()


def test_duplicate_slug_is_fatal(make_doc):
    """Two documents with one slug raise DuplicateSlugError naming both sources."""
    docs = [make_doc("one.md", slug="same"), make_doc("sub/two.md", slug="same")]
    with pytest.raises(DuplicateSlugError, match="same") as exc:
        build_index(docs)
    assert set(exc.value.sources) == {"one.md", "sub/two.md"}


def test_destinations_cover_pages_and_assets(make_doc):
    """Every page and asset claims its output path."""
    index = build_index([make_doc("posts/a.md", slug="hello")], assets=["css/site.css"])
    assert dict(index.destinations) == {
        "posts/hello.html": "posts/a.md",
        "css/site.css": "css/site.css",
    }


def test_page_asset_collision_is_fatal(make_doc):
    """A page and an asset resolving to the same output path raise OutputCollisionError."""
    with pytest.raises(OutputCollisionError, match="about.html"):
        build_index([make_doc("about.md")], assets=["about.html"])
