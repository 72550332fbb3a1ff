"""mpmerge CLI entrypoint."""

from __future__ import annotations

import logging

import typer

app = typer.Typer(
    name="mpmerge",
    add_completion=False,
    no_args_is_help=True,
    help="Merge a mini-program build output into another one as a subpackage.",
)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """mpmerge CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("version")
def version() -> None:
    """Print the installed mpmerge version."""
    from mpmerge import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `mpmerge --help` is fast.
    """
    from mpmerge.cli.commands import inject as inject_cmd
    from mpmerge.cli.commands import merge as merge_cmd
    from mpmerge.cli.commands import merge_manifest as merge_manifest_cmd

    merge_cmd.register(app)
    inject_cmd.register(app)
    merge_manifest_cmd.register(app)


_register_commands()
