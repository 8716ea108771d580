"""Unit tests for core/render.py"""

import pytest

from mdsite.core.errors import TemplateError
from mdsite.core.models import RenderOptions
from mdsite.core.render import (
    apply_template,
    load_templates,
    make_template,
    select_template,
)


OPTIONS = RenderOptions()


def test_make_template_collects_slots():
    """Slot names are read from {{ slot }} markers."""
    t = make_template("base", "<h1>{{ title }}</h1>{{content}}{{ meta.author }}")
    assert t.slots == {"title", "content", "meta.author"}


def test_apply_template_fills_slots(make_doc):
    """Title, body, tag badges, keywords and date are substituted."""
    doc = make_doc("posts/a.md", title="A & B", date="2025-01-01", tags=["rust", "intro"],
                   body=("<p>Hello</p>\n",))
    t = make_template("base", "<title>{{ title }}</title>|{{ content }}|{{ tags }}|{{ keywords }}|{{ date }}|{{ url }}")
    html = apply_template(doc, t, OPTIONS)
    assert html == (
        "<title>A &amp; B</title>|<p>Hello</p>\n|"
        '<span class="tag clickable-tag" data-tag="rust">#rust</span>'
        '<span class="tag clickable-tag" data-tag="intro">#intro</span>'
        "|rust, intro|2025-01-01|/posts/a.html"
    )


def test_missing_date_renders_empty(make_doc):
    """An undated document fills the date slot with an empty string."""
    t = make_template("base", "[{{ date }}]")
    assert apply_template(make_doc("a.md"), t, OPTIONS) == "[]"


def test_meta_slots_and_unknown_slots(make_doc):
    """Opaque frontmatter fields are exposed as meta.<key>; unknown slots render empty."""
    doc = make_doc("a.md", meta={"author": "Ada <ada@example.org>"})
    t = make_template("base", "{{ meta.author }}|{{ meta.missing }}|{{ nonsense }}")
    assert apply_template(doc, t, OPTIONS) == "Ada &lt;ada@example.org&gt;||"


def test_content_is_not_rescanned_for_slots(make_doc):
    """Literal {{ ... }} text inside the body is left alone."""
    doc = make_doc("a.md", body=("<code>{{ title }}</code>",))
    t = make_template("base", "{{ content }}")
    assert apply_template(doc, t, OPTIONS) == "<code>{{ title }}</code>"


def test_apply_template_requires_resolved_document(make_doc):
    """Unresolved directives cannot be rendered into a page."""
    from mdsite.core.models import Directive
    doc = make_doc("a.md", body=(Directive(name="post_list", source="a.md", line=1),))
    with pytest.raises(ValueError, match="unresolved"):
        apply_template(doc, make_template("base", "{{ content }}"), OPTIONS)


def test_select_template(make_doc):
    """A page's template field wins; otherwise the default is used."""
    templates = {"base": make_template("base", "b"), "post": make_template("post", "p")}
    assert select_template(make_doc("a.md"), templates).name == "base"
    assert select_template(make_doc("b.md", template="post"), templates).name == "post"


def test_select_missing_template(make_doc):
    """A missing template is a per-document TemplateError."""
    with pytest.raises(TemplateError, match="gallery"):
        select_template(make_doc("a.md", template="gallery"), {"base": make_template("base", "")})


def test_load_templates(tmp_path):
    """Templates are keyed by their path under the template dir, without suffix."""
    (tmp_path / "templates" / "partials").mkdir(parents=True)
    (tmp_path / "templates" / "base.html").write_text("<p>{{ title }}</p>")
    (tmp_path / "templates" / "partials" / "post.html").write_text("{{ content }}")
    templates = load_templates(["templates/base.html", "templates/partials/post.html"], tmp_path)
    assert set(templates) == {"base", "partials/post"}
    assert templates["base"].slots == {"title"}
