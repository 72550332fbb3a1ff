"""Upward search for an ancestor module (normally `app.js`).

Starting from the directory that holds a page module, walk parent directories
until a file with the wanted name is found or the boundary directory has been
checked. The result is a relative reference usable in `require()` from the
page module: it always starts with `./` or `../` and uses `/` separators.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .model import BOOTSTRAP_MODULE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocateResult:
    found: bool
    relative_path: str = ""

    def __bool__(self) -> bool:
        return self.found


def _to_require_path(target: Path, start_dir: Path) -> str:
    rel = os.path.relpath(target, start_dir).replace(os.sep, "/")
    if rel.startswith("./") or rel.startswith("../"):
        return rel
    # Same directory: relpath yields a bare filename, require() needs a prefix.
    return f"./{rel}"


def locate_ancestor(
    start_file: Path | str,
    target_name: str = BOOTSTRAP_MODULE,
    boundary: Path | str | None = None,
) -> LocateResult:
    """Find `target_name` in the directory of `start_file` or one of its ancestors.

    Args:
        start_file: file whose directory the search starts from. It does not
            need to exist.
        target_name: plain file name to look for (no separators).
        boundary: highest directory that may be inspected (inclusive). When
            None, the search may run up to the filesystem root.

    Returns:
        LocateResult(found=True, relative_path="../app.js") on success,
        LocateResult(found=False, relative_path="") otherwise.
    """
    if not isinstance(target_name, str) or not target_name or "/" in target_name or os.sep in target_name:
        raise ValueError(f"locate: target_name must be a plain file name, got {target_name!r}")

    start_dir = Path(start_file).resolve().parent

    if boundary is None:
        limit = Path(start_dir.anchor)
    else:
        limit = Path(boundary).resolve()

    try:
        depth = len(start_dir.relative_to(limit).parts)
    except ValueError:
        logger.debug("start %s is outside boundary %s", start_dir, limit)
        return LocateResult(found=False)

    current = start_dir
    for _ in range(depth + 1):
        candidate = current / target_name
        if candidate.is_file():
            rel = _to_require_path(candidate, start_dir)
            logger.debug("found %s for %s: %s", candidate, start_file, rel)
            return LocateResult(found=True, relative_path=rel)
        if current == limit:
            break
        parent = current.parent
        if parent == current:
            break
        current = parent

    logger.debug("%s not found above %s (boundary %s)", target_name, start_dir, limit)
    return LocateResult(found=False)
