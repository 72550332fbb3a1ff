"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import mpmerge` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared Test Helpers for bundle trees
# =============================================================================


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def make_bundle(
    root: Path,
    manifest: dict[str, Any],
    *,
    app_js: bool = True,
    page_text: str = '"use strict";Page({});',
) -> Path:
    """Create a build output: app.json, app.js, app.wxss and one .js per page."""
    root.mkdir(parents=True, exist_ok=True)
    write_json(root / "app.json", manifest)
    write_text(root / "app.wxss", "page{}")
    if app_js:
        write_text(root / "app.js", '"use strict";App({});')
    for page in manifest.get("pages", []):
        write_text(root / f"{page}.js", page_text)
        write_text(root / f"{page}.wxml", "<view/>")
    return root
