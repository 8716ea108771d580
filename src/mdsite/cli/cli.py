"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Markdown to static HTML site generator")

app.command(name="build")(build_cmd)


@app.callback()
def main():
    """Markdown to static HTML site generator."""
