"""Directive resolution: expand placeholders using only the SiteIndex"""

from enum import Enum

from mdsite.core.errors import DirectiveParameterError, UnknownDirectiveError
from mdsite.core.fragments import post_list, tag_list
from mdsite.core.models import Directive, Document, RenderOptions, SiteIndex


class DirectiveKind(str, Enum):
    """Closed set of directives an author may use"""
    post_list = "post_list"
    tag_list = "tag_list"


ALIASES = {"posts": DirectiveKind.post_list, "tags": DirectiveKind.tag_list}
PARAMETERS: dict[DirectiveKind, set[str]] = {
    DirectiveKind.post_list: {"tag", "limit"},
    DirectiveKind.tag_list: set(),
}


def directive_kind(directive: Directive) -> DirectiveKind:
    """Map a directive name (or alias) to its kind; unknown names are fatal for the document."""
    name = directive.name.lower()
    if name in ALIASES:
        return ALIASES[name]
    try:
        return DirectiveKind(name)
    except ValueError:
        raise UnknownDirectiveError(directive.name, directive.source, directive.line) from None


def _check_params(kind: DirectiveKind, directive: Directive) -> None:
    unknown = sorted(set(directive.params) - PARAMETERS[kind])
    if unknown:
        raise DirectiveParameterError(
            directive.source, directive.line,
            f"'{directive.name}' does not accept parameter(s): {', '.join(unknown)}",
        )


def _limit(directive: Directive) -> int | None:
    raw = directive.params.get("limit")
    if raw is None:
        return None
    try:
        limit = int(raw)
    except ValueError:
        limit = -1
    if limit < 0:
        raise DirectiveParameterError(
            directive.source, directive.line,
            f"limit must be a non-negative integer, got '{raw}'",
        )
    return limit


def select_posts(index: SiteIndex, tag: str | None = None, limit: int | None = None) -> tuple[Document, ...]:
    """Dated documents in index order, optionally restricted to one tag and capped."""
    if tag is None:
        posts = index.posts
    else:
        posts = tuple(d for d in index.tags.get(tag, ()) if d.date is not None)
    return posts if limit is None else posts[:limit]


def resolve_directive(directive: Directive, index: SiteIndex, options: RenderOptions) -> str:
    """Render one directive to an HTML fragment."""
    kind = directive_kind(directive)
    _check_params(kind, directive)

    if kind is DirectiveKind.post_list:
        tag = directive.params.get("tag", "").strip().lower() or None
        return post_list(select_posts(index, tag, _limit(directive)), options)
    if kind is DirectiveKind.tag_list:
        return tag_list({t: posts for t in index.tags if (posts := select_posts(index, t))})
    raise AssertionError(f"unhandled directive kind: {kind}")


def resolve_document(doc: Document, index: SiteIndex, options: RenderOptions) -> Document:
    """Return a copy of doc with every directive replaced by its fragment.

    Already-rendered HTML segments are carried over untouched; the result's
    body is a single HTML string.
    """
    if doc.is_resolved and len(doc.body) <= 1:
        return doc
    html = ''.join(
        resolve_directive(s, index, options) if isinstance(s, Directive) else s
        for s in doc.body
    )
    return doc.model_copy(update={"body": (html,)})
