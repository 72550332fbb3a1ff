"""`mpmerge locate` and `mpmerge inject` commands.

Single-step helpers around the ancestor locator:
- `locate`: print the require() reference from a file to the nearest `app.js`
- `inject`: patch a page module to require the nearest `app.js`

Both exit with code 1 when nothing is found within the boundary.
"""

from __future__ import annotations

from pathlib import Path

import typer

from mpmerge.core.inject import inject_bootstrap
from mpmerge.core.locate import locate_ancestor
from mpmerge.core.model import BOOTSTRAP_MODULE


def register(app: typer.Typer) -> None:
    @app.command("locate")
    def locate(
        start: str = typer.Argument(..., help="File to start the upward search from."),
        boundary: str = typer.Option(..., "--boundary", help="Highest directory to search (inclusive)."),
        name: str = typer.Option(BOOTSTRAP_MODULE, "--name", help="File name to look for."),
    ) -> None:
        """Print the relative reference to the nearest ancestor module."""
        try:
            result = locate_ancestor(Path(start), name, Path(boundary))
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
        if not result.found:
            typer.echo(f"{name} not found", err=True)
            raise typer.Exit(code=1)
        typer.echo(result.relative_path)

    @app.command("inject")
    def inject(
        page: str = typer.Argument(..., help="Page module (.js) to patch."),
        boundary: str = typer.Option(..., "--boundary", help="Bundle root; highest directory to search (inclusive)."),
        name: str = typer.Option(BOOTSTRAP_MODULE, "--name", help="Bootstrap module file name."),
    ) -> None:
        """Patch a page module to require the nearest ancestor bootstrap module."""
        page_path = Path(page)
        if not page_path.is_file():
            raise typer.BadParameter(f"page module not found: {page_path}")
        try:
            result = inject_bootstrap(page_path, Path(boundary), name)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
        if not result.found:
            typer.echo(f"{name} not found", err=True)
            raise typer.Exit(code=1)
        typer.echo(result.relative_path)
