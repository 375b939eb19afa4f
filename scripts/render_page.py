#!/usr/bin/env python3
"""
Page Rendering CLI

Renders pages of a folio project and lists its sitemap.

Commands:
    render - Render one page to stdout
    list   - List every resource in the sitemap

Examples:\n

    render_page.py render index.html                        # Render from the current project

    render_page.py render blog/index.html -P my-site        # Render from another project

    render_page.py render index.html --layout layout        # Wrap in a layout

    render_page.py list -P my-site                          # Show destination -> source
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from folio.application import Application
from folio.config import LOGS_PATH
from folio.contexts.rendering import RenderError, TemplateNotFound
from folio.contexts.rendering.logger import setup_rendering_logger

load_dotenv()

app = typer.Typer(
    help="Render pages of a folio project",
    add_completion=False,
    invoke_without_command=True,
)

ProjectOption = Annotated[
    Path,
    typer.Option(
        "--project",
        "-P",
        help="Project root (holds config.yaml and the source directory)",
        exists=True,
        file_okay=False,
    ),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    destination: Annotated[
        str,
        typer.Argument(help="Destination path of the page (e.g., blog/index.html)"),
    ],
    project: ProjectOption = Path("."),
    layout: Annotated[
        Optional[str],
        typer.Option("--layout", "-l", help="Layout to wrap the page in (overrides config)"),
    ] = None,
    no_layout: Annotated[
        bool,
        typer.Option("--no-layout", help="Render without the configured layout"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Echo debug logging (template lookups)"),
    ] = False,
):
    """
    Render one page and print it to stdout.

    Examples:\n

        $ render_page.py render index.html                 # Render with configured layout

        $ render_page.py render feed.xml --no-layout       # Render bare
    """
    site = Application(project)
    setup_rendering_logger(LOGS_PATH, site=site, console_level="DEBUG" if verbose else "WARNING")

    options = {}
    if no_layout:
        options["layout"] = None
    elif layout:
        options["layout"] = layout

    try:
        output = site.render(destination, options=options)
    except (TemplateNotFound, RenderError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(output, nl=False)


@app.command("list")
def list_command(project: ProjectOption = Path(".")):
    """List every resource: destination path, source path and whether it is a template."""
    site = Application(project)

    resources = site.sitemap.resources
    if not resources:
        typer.echo(f"No resources under {site.source_dir}")
        raise typer.Exit()

    width = max(len(r.destination_path) for r in resources)
    for resource in resources:
        kind = resource.engine or "static"
        typer.echo(f"{resource.destination_path:<{width}}  {resource.source_file.relative_path}  [{kind}]")


if __name__ == "__main__":
    app()
