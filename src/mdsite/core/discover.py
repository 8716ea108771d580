"""Source discovery: walk the source root and classify content, templates and assets"""

import logging
from pathlib import Path
from typing import Optional

from mdsite.core.errors import DiscoveryError
from mdsite.core.models import SourceTree


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.markdown'}
TEMPLATE_EXTENSIONS = {'.html'}


def _is_hidden(rel: Path) -> bool:
    return any(part.startswith('.') for part in rel.parts)


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def discover_sources(
    root: Path,
    template_dir: str = 'templates',
    exclude: Optional[Path] = None,
    ) -> SourceTree:
    """Classify every file under root; each list is sorted by relative path.

    Markdown files are content, .html files under root/template_dir are
    templates, anything else outside template_dir is an asset copied
    verbatim. Hidden entries and the exclude directory (usually the output
    dir) are skipped.
    """
    if not root.exists():
        raise DiscoveryError(f"source root does not exist: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"source root is not a directory: {root}")

    root = root.resolve()
    templates_root = root / template_dir
    exclude = exclude.resolve() if exclude is not None else None

    content, templates, assets = [], [], []
    for p in root.rglob('*'):
        if not p.is_file():
            continue
        rel = p.relative_to(root)
        if _is_hidden(rel):
            continue
        if exclude is not None and _is_within(p.resolve(), exclude):
            continue

        key = rel.as_posix()
        suffix = p.suffix.lower()
        if _is_within(p, templates_root):
            if suffix in TEMPLATE_EXTENSIONS:
                templates.append(key)
            else:
                logger.debug("ignoring non-template file %s", key)
        elif suffix in MD_EXTENSIONS:
            content.append(key)
        else:
            assets.append(key)

    logger.debug(
        "discovered %d content, %d template, %d asset file(s) under %s",
        len(content), len(templates), len(assets), root,
    )
    return SourceTree(
        root=root,
        content=tuple(sorted(content)),
        templates=tuple(sorted(templates)),
        assets=tuple(sorted(assets)),
    )
