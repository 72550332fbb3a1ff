"""`mpmerge merge-manifest` command.

Registers the pages of a source `app.json` as a subpackage in a target
`app.json` and rewrites the target in full. Files are not copied.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mpmerge.bundle.manifest import manifest_pages, read_manifest, write_manifest
from mpmerge.core.merge import MISSING, merge_manifest
from mpmerge.core.model import subpackage_root_for


def register(app: typer.Typer) -> None:
    @app.command("merge-manifest")
    def merge_manifest_cmd(
        source: str = typer.Argument(..., help="Source app.json."),
        target: str = typer.Argument(..., help="Target app.json (rewritten)."),
        root: Optional[str] = typer.Option(
            None,
            "--root",
            help="Subpackage root (default: name of the source app.json directory, plus '/').",
        ),
        independent: bool = typer.Option(False, "--independent", help="Register the subpackage as independent."),
        preload: bool = typer.Option(False, "--preload", help="Replace the target preloadRule with the source one."),
    ) -> None:
        """Append the source pages to the target subPackages."""
        source_path = Path(source)
        target_path = Path(target)
        subpackage_root = root if root is not None else subpackage_root_for(source_path.parent)

        try:
            source_manifest = read_manifest(source_path)
            target_manifest = read_manifest(target_path)
            merged = merge_manifest(
                manifest_pages(source_manifest),
                source_manifest.get("preloadRule", MISSING),
                target_manifest,
                subpackage_root=subpackage_root,
                independent=independent,
                propagate_preload=preload,
            )
        except (ValueError, OSError) as e:
            raise typer.BadParameter(str(e)) from e

        try:
            write_manifest(target_path, merged)
        except OSError as e:
            typer.echo(f"cannot write {target_path}: {e}", err=True)
            raise typer.Exit(code=1) from e
        typer.echo(str(target_path))
