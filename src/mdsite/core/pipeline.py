"""Pipeline step functions: parse, index, render and write orchestration

Phase 1 (parse) runs per document in a thread pool and is joined before the
SiteIndex is built. Phase 2 (resolve + template) then runs per document
against that read-only index. Nothing is written until both phases finish.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, TypeVar

from mdsite.config import Settings
from mdsite.core.compile import compile_markdown
from mdsite.core.discover import discover_sources
from mdsite.core.errors import BuildError, DiscoveryError, DocumentError, ParseError
from mdsite.core.frontmatter import parse_frontmatter
from mdsite.core.index import build_index
from mdsite.core.models import (
    BuildReport, BuildStatus, Document, RenderOptions, SiteIndex, Template,
)
from mdsite.core.render import apply_template, load_templates, select_template
from mdsite.core.resolve import resolve_document
from mdsite.core.write import write_site


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


def _isolated(fn: Callable[[T], R]) -> Callable[[T], R | DocumentError]:
    """Wrap fn so a DocumentError is returned as a value instead of raised."""
    def _run(item: T) -> R | DocumentError:
        try:
            return fn(item)
        except DocumentError as e:
            return e
    return _run


def _map(fn: Callable[[T], R], items: Iterable[T], workers: int | None) -> list[R]:
    """Apply fn to every item in a thread pool; results keep input order."""
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(fn, items))


def load_document(rel: str, root: Path, parser_config: str = 'gfm-like') -> Document:
    """Read, split and compile one source file. Depends only on that file's bytes."""
    try:
        raw = (root / rel).read_bytes()
    except OSError as e:
        raise ParseError(rel, f"cannot read file: {e}") from e

    parsed = parse_frontmatter(raw, rel)
    fm = parsed.frontmatter
    body = compile_markdown(parsed.body, rel, parsed.body_line, parser_config)
    return Document(
        path=rel,
        slug=fm.slug,
        title=fm.title,
        date=fm.date,
        tags=fm.tags,
        template=fm.template,
        meta=fm.extra,
        body=body,
    )


def run_parse(
    paths: Iterable[str],
    root: Path,
    parser_config: str,
    workers: int | None = None,
    ) -> tuple[list[Document], list[DocumentError]]:
    """Phase 1: parse every document in parallel and join. Returns (documents, errors)."""
    load = _isolated(lambda rel: load_document(rel, root, parser_config))
    documents, errors = [], []
    for result in _map(load, paths, workers):
        (errors if isinstance(result, DocumentError) else documents).append(result)
    return documents, errors


def render_page(
    doc: Document,
    index: SiteIndex,
    templates: dict[str, Template],
    options: RenderOptions,
    default_template: str = 'base',
    ) -> tuple[str, str]:
    """Resolve directives and apply the page template. Returns (output_path, html)."""
    template = select_template(doc, templates, default_template)
    resolved = resolve_document(doc, index, options)
    return resolved.output_path.as_posix(), apply_template(resolved, template, options)


def run_render(
    index: SiteIndex,
    templates: dict[str, Template],
    options: RenderOptions,
    default_template: str = 'base',
    workers: int | None = None,
    ) -> tuple[dict[str, str], list[DocumentError]]:
    """Phase 2: render every indexed document in parallel. Returns (pages, errors)."""
    render = _isolated(lambda doc: render_page(doc, index, templates, options, default_template))
    pages, errors = {}, []
    for result in _map(render, index.documents, workers):
        if isinstance(result, DocumentError):
            errors.append(result)
        else:
            pages[result[0]] = result[1]
    return pages, errors


def _load_templates(paths: list[str], root: Path, template_dir: str) -> dict[str, Template]:
    try:
        return load_templates(paths, root, template_dir)
    except (OSError, UnicodeDecodeError) as e:
        raise DiscoveryError(f"cannot read template: {e}") from e


def build_site(settings: Settings) -> BuildReport:
    """Run the full build and report success, partial success or a fatal error.

    Build errors are never raised from here: per-document errors are collected
    into the report and a global error sets status to fatal.
    """
    report = BuildReport()
    workers = settings.workers or None
    source = Path(settings.source_dir)
    output_dir = Path(settings.output_dir)
    options = RenderOptions(base_url=settings.base_url, date_format=settings.date_format)

    try:
        tree = discover_sources(source, settings.template_dir, exclude=output_dir)
        logger.info("Found %d markdown file(s) in %s", len(tree.content), source)
        templates = _load_templates(list(tree.templates), tree.root, settings.template_dir)

        documents, parse_errors = run_parse(tree.content, tree.root, settings.parser_config, workers)
        index = build_index(documents, tree.assets)

        pages, render_errors = run_render(index, templates, options, settings.default_template, workers)
        report.errors = sorted(parse_errors + render_errors, key=lambda e: e.source)

        report.pages, report.assets = write_site(pages, list(tree.assets), tree.root, output_dir, workers)
    except BuildError as e:
        logger.error("Build failed: %s", e)
        report.status = BuildStatus.fatal
        report.fatal = e
        return report

    for err in report.errors:
        logger.warning("Skipped %s", err)
    report.status = BuildStatus.partial if report.errors else BuildStatus.success
    logger.info(
        "Wrote %d page(s) and %d asset(s) to %s",
        len(report.pages), len(report.assets), output_dir,
    )
    return report
