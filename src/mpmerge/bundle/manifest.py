"""`app.json` manifest read/write.

This module is intentionally small and dependency-light to avoid import cycles.
Manifests are plain dicts; only `pages`, `subPackages` and `preloadRule` carry
meaning for mpmerge, all other keys pass through untouched.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mpmerge.core.model import normalize_pages

MANIFEST_NAME = "app.json"


class ManifestParseError(ValueError):
    """Raised when a manifest is not a JSON object."""

    def __init__(self, message: str, *, path: Path | None = None):
        where = str(path) if path is not None else MANIFEST_NAME
        super().__init__(f"{where}: {message}")
        self.path = path


class ManifestError(ValueError):
    """Raised when a parsed manifest has an unusable structure."""


def parse_manifest(text: str, *, path: Path | None = None) -> dict[str, Any]:
    """Parse manifest text into a dict (key order preserved)."""
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"invalid JSON: {e}", path=path) from e
    if not isinstance(obj, dict):
        raise ManifestParseError(f"expected JSON object, got {type(obj).__name__}", path=path)
    return obj


def read_manifest(path: Path) -> dict[str, Any]:
    p = Path(path)
    return parse_manifest(p.read_text(encoding="utf-8"), path=p)


def manifest_pages(manifest: dict[str, Any]) -> list[str]:
    """Return the `pages` array of a manifest, validated."""
    if "pages" not in manifest:
        raise ManifestError("app.json: missing required 'pages' array")
    try:
        return normalize_pages(manifest["pages"], where="app.json: pages")
    except ValueError as e:
        raise ManifestError(str(e)) from e


def dump_manifest(manifest: dict[str, Any]) -> str:
    # Keep document key order; non-ASCII page titles stay readable.
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifest(path: Path, manifest: dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dump_manifest(manifest), encoding="utf-8")
