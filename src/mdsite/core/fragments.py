"""HTML fragments consumed by the browser-side search/tag filter

Class names and the data-tag attribute are a stable contract with the
filter script: .post-list > .post-item, h3 a for the title, and
.clickable-tag[data-tag] for each tag.
"""

from collections.abc import Iterable, Mapping
from html import escape

from mdsite.core.models import Document, RenderOptions


def tag_badge(tag: str, count: int | None = None) -> str:
    """One clickable tag element carrying its machine-readable identifier."""
    label = f"#{escape(tag)}"
    if count is not None:
        label += f' <span class="tag-count">{count}</span>'
    return f'<span class="tag clickable-tag" data-tag="{escape(tag, quote=True)}">{label}</span>'


def tag_badges(tags: Iterable[str]) -> str:
    return ''.join(tag_badge(t) for t in tags)


def post_item(doc: Document, options: RenderOptions) -> str:
    return (
        '  <article class="post-item">\n'
        f'    <h3><a href="{escape(doc.url(options.base_url), quote=True)}">{escape(doc.title)}</a></h3>\n'
        '    <div class="post-meta">\n'
        f'      <span class="post-date">{escape(options.format_date(doc.date))}</span>\n'
        f'      <span class="post-tags">{tag_badges(doc.tags)}</span>\n'
        '    </div>\n'
        '  </article>\n'
    )


def post_list(docs: Iterable[Document], options: RenderOptions) -> str:
    """Listing container with one entry per document; empty input still yields a valid container."""
    items = ''.join(post_item(d, options) for d in docs)
    if not items:
        return '<div class="post-list">\n  <p class="no-posts">No posts found.</p>\n</div>\n'
    return f'<div class="post-list">\n{items}</div>\n'


def tag_list(tags: Mapping[str, tuple[Document, ...]]) -> str:
    """Every tag with the number of listed posts carrying it."""
    items = ''.join(f'  <li>{tag_badge(t, len(docs))}</li>\n' for t, docs in tags.items())
    return f'<ul class="tag-list">\n{items}</ul>\n'
