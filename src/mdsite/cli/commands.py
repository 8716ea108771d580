"""CLI command implementations"""

import logging
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.models import BuildReport, BuildStatus
from mdsite.core.pipeline import build_site


EXIT_CODES = {BuildStatus.success: 0, BuildStatus.fatal: 1, BuildStatus.partial: 2}


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format="%(message)s", force=True)


def _echo_report(report: BuildReport, output_dir: str) -> None:
    """Print written pages, per-document errors and a summary line."""
    for page in report.pages:
        typer.echo(f"  {page}")
    for err in report.errors:
        typer.echo(f"  skipped: {err}", err=True)
    typer.echo(
        f"Build {report.status.value} - "
        f"{len(report.pages)} page(s), "
        f"{len(report.assets)} asset(s), "
        f"{len(report.errors)} skipped -> {output_dir}/"
    )


def build_cmd(
    source: Annotated[Optional[str], typer.Argument(help="Source directory (markdown, templates, assets)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", "-o", help="Output directory")] = None,
    templates: Annotated[Optional[str], typer.Option("--template-dir", help="Template directory inside the source")] = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="URL prefix for generated links")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", "-j", help="Worker threads; 0 = default")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    """Build the site: parse -> index -> resolve -> render -> write."""
    settings = _settings(overrides={
        "source_dir": source, "output_dir": out, "template_dir": templates,
        "base_url": base_url, "parser_config": parser, "workers": workers,
        "log_level": "DEBUG" if verbose else None,
    })
    _configure_logging(settings.log_level)

    report = build_site(settings)
    if report.status is BuildStatus.fatal:
        _fail("Build failed", report.fatal)
    _echo_report(report, settings.output_dir)
    raise typer.Exit(EXIT_CODES[report.status])
