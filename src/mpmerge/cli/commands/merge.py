"""`mpmerge merge` command.

Runs a full merge: optional clean, build both projects, patch the source enter
page, copy the source output into the target output and register it as a
subpackage in the target `app.json`.

Exit codes:
- 0: every step succeeded
- 1: missing -o/-O, or at least one step reported a failure
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mpmerge.pipeline import DEFAULT_BUILD_CMD, ConfigurationError, MergeConfig, run_merge
from mpmerge.status import StatusReporter


def register(app: typer.Typer) -> None:
    @app.command("merge")
    def merge(
        source_output: Optional[str] = typer.Option(None, "--source-output", "-o", help="Source project build output directory."),
        target_output: Optional[str] = typer.Option(None, "--target-output", "-O", help="Target project build output directory."),
        source_cmd: str = typer.Option(
            DEFAULT_BUILD_CMD,
            "--source-cmd",
            "-c",
            help="Build command run in the parent of the source output (empty string skips).",
        ),
        target_cmd: str = typer.Option(
            DEFAULT_BUILD_CMD,
            "--target-cmd",
            "-C",
            help="Build command run in the parent of the target output (empty string skips).",
        ),
        enter_page: Optional[str] = typer.Option(
            None,
            "--enter-page",
            "-e",
            help="Subpackage entry page, relative to the source output, without extension (default: first page).",
        ),
        clean_source_output: bool = typer.Option(False, "--clean-source-output", help="Delete the source output before building."),
        clean_target_output: bool = typer.Option(False, "--clean-target-output", help="Delete the target output before building."),
        independent: bool = typer.Option(False, "--independent", help="Register the subpackage as independent."),
        preload_subpackages: bool = typer.Option(
            False,
            "--preload-subpackages",
            help="Copy the source preloadRule into the target app.json (replaces the target's).",
        ),
    ) -> None:
        """Merge the source build output into the target as a subpackage."""
        reporter = StatusReporter(echo=True)
        config = MergeConfig(
            source_output=Path(source_output) if source_output else None,
            target_output=Path(target_output) if target_output else None,
            source_cmd=source_cmd,
            target_cmd=target_cmd,
            enter_page=enter_page,
            clean_source_output=clean_source_output,
            clean_target_output=clean_target_output,
            independent=independent,
            preload_subpackages=preload_subpackages,
        )
        try:
            report = run_merge(config, reporter)
        except ConfigurationError as e:
            reporter.fail(str(e))
            raise typer.Exit(code=1) from e

        if not report.ok:
            raise typer.Exit(code=1)
