"""Bundle load/clean/copy/build for mpmerge.

A bundle is a mini-program build output directory containing:
- app.json (pages, subPackages, preloadRule, ...)
- app.js (bootstrap module)
- <page>.js for every entry in `pages`
- any other assets, copied as-is

This module intentionally avoids any dependency on cli/pipeline to prevent cycles.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from mpmerge.core.model import page_module_path, subpackage_root_for

from .manifest import MANIFEST_NAME, manifest_pages, read_manifest

logger = logging.getLogger(__name__)


class FilesystemError(OSError):
    """Raised when a bundle directory cannot be deleted or copied."""


@dataclass(frozen=True)
class Bundle:
    root: Path
    manifest: dict[str, Any]

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_NAME

    @property
    def pages(self) -> list[str]:
        return manifest_pages(self.manifest)

    @property
    def subpackage_root(self) -> str:
        return subpackage_root_for(self.root)

    def page_path(self, page: str) -> Path:
        return page_module_path(self.root, page)

    def page_paths(self) -> list[Path]:
        return [self.page_path(p) for p in self.pages]


def load_bundle(root: Path) -> Bundle:
    """Load a bundle from disk (reads `app.json` once)."""
    root = Path(root).resolve()
    manifest = read_manifest(root / MANIFEST_NAME)
    return Bundle(root=root, manifest=manifest)


def remove_tree(path: Path) -> None:
    """Recursively delete a build output directory.

    Raises:
        FilesystemError: if the directory does not exist or cannot be removed.
    """
    p = Path(path)
    if not p.exists():
        raise FilesystemError(f"remove: directory does not exist: {p}")
    try:
        shutil.rmtree(p)
    except OSError as e:
        raise FilesystemError(f"remove: failed to delete {p}: {e}") from e


def remove_files(root: Path, names: Iterable[str]) -> list[Path]:
    """Delete the given files under `root` if present; return those removed."""
    removed: list[Path] = []
    for name in names:
        p = Path(root) / name
        if p.is_file():
            p.unlink()
            removed.append(p)
        logger.debug("remove %s (%s)", p, "deleted" if p in removed else "absent")
    return removed


def copy_bundle(source: Path, target_parent: Path) -> Path:
    """Copy directory `source` into `target_parent` as `<target_parent>/<source.name>`.

    Existing files at the destination are overwritten; other files are kept.

    Raises:
        FilesystemError: if the source is missing or the copy fails.
    """
    src = Path(source).resolve()
    if not src.is_dir():
        raise FilesystemError(f"copy: source directory does not exist: {src}")
    dest = Path(target_parent).resolve() / src.name
    try:
        shutil.copytree(src, dest, dirs_exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"copy: failed to copy {src} to {dest}: {e}") from e
    return dest


def run_build(command: str, cwd: Path) -> subprocess.CompletedProcess:
    """Run a project build command through the shell in `cwd`.

    The command output is passed through to the terminal. A non-zero exit code
    is returned, not raised.
    """
    logger.debug("build %r in %s", command, cwd)
    return subprocess.run(command, shell=True, cwd=str(cwd), check=False)
