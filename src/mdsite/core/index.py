"""Site index: the single global view built once all documents are parsed"""

from collections.abc import Iterable

from mdsite.core.errors import DuplicateSlugError, OutputCollisionError
from mdsite.core.models import Document, SiteIndex, freeze_mapping


def sort_key(doc: Document) -> tuple:
    """Newest first, undated last, ties broken by source path."""
    if doc.date is None:
        return (1, 0, doc.path)
    return (0, -doc.date.toordinal(), doc.path)


def _claim(destinations: dict[str, str], dest: str, source: str) -> None:
    if dest in destinations:
        raise OutputCollisionError(dest, destinations[dest], source)
    destinations[dest] = source


def build_index(documents: Iterable[Document], assets: Iterable[str] = ()) -> SiteIndex:
    """Aggregate every parsed document into an immutable SiteIndex.

    Raises DuplicateSlugError when two documents share a slug and
    OutputCollisionError when a page and an asset would be written to the
    same path. Both checks happen before anything is written.
    """
    ordered = sorted(documents, key=sort_key)

    slugs: dict[str, str] = {}
    for doc in sorted(ordered, key=lambda d: d.path):
        if doc.slug in slugs:
            raise DuplicateSlugError(doc.slug, slugs[doc.slug], doc.path)
        slugs[doc.slug] = doc.path

    destinations: dict[str, str] = {}
    for doc in ordered:
        _claim(destinations, doc.output_path.as_posix(), doc.path)
    for asset in sorted(assets):
        _claim(destinations, asset, asset)

    tags: dict[str, list[Document]] = {}
    for doc in ordered:
        for tag in doc.tags:
            tags.setdefault(tag, []).append(doc)

    return SiteIndex(
        documents=tuple(ordered),
        posts=tuple(d for d in ordered if d.date is not None),
        tags=freeze_mapping({t: tuple(docs) for t, docs in sorted(tags.items())}),
        destinations=freeze_mapping(destinations),
    )
