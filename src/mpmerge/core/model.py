"""Core data model for mpmerge.

- `SubpackageDescriptor`: one entry of an `app.json` `subPackages` array.
- Normalization helpers for the loosely-typed parts of a manifest.
- Bundle path conventions (page path -> module file, directory -> subpackage root).

This module must not import bundle/cli/pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

BOOTSTRAP_MODULE = "app.js"
MODULE_EXT = ".js"


def _norm_str(value: Any, *, where: str) -> str:
    """Validate a required string: reject non-str and empty/whitespace."""
    if not isinstance(value, str):
        raise ValueError(f"{where}: expected str, got {type(value).__name__}")
    if not value.strip():
        raise ValueError(f"{where}: must be a non-empty string")
    return value


def normalize_pages(value: Any, *, where: str = "pages") -> list[str]:
    """Return a manifest page list as a new list of strings.

    Order and spelling are preserved verbatim; pages are registered in list order.
    """
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{where}: expected JSON array, got {type(value).__name__}")
    return [_norm_str(p, where=f"{where}[{i}]") for i, p in enumerate(value)]


def normalize_subpackages(value: Any) -> list[Any]:
    """Coerce a manifest `subPackages` value into a list.

    Absent or non-array values become an empty list. Existing entries are kept
    as the same objects, in the same order.
    """
    if isinstance(value, list):
        return list(value)
    return []


@dataclass(frozen=True)
class SubpackageDescriptor:
    """A subpackage entry: `{root, pages, independent}`.

    `root` ends with "/" and `pages` stay relative to it.
    """

    root: str
    pages: tuple[str, ...]
    independent: bool = False

    def __post_init__(self) -> None:
        root = _norm_str(self.root, where="subPackages[*].root")
        if not root.endswith("/"):
            raise ValueError(f"subPackages[*].root: must end with '/', got {root!r}")
        if root.startswith("/"):
            raise ValueError(f"subPackages[*].root: must be relative, got {root!r}")
        object.__setattr__(self, "pages", tuple(normalize_pages(list(self.pages), where="subPackages[*].pages")))
        object.__setattr__(self, "independent", bool(self.independent))

    def to_json(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "pages": list(self.pages),
            "independent": self.independent,
        }


def subpackage_root_for(bundle_dir: Path | str) -> str:
    """Subpackage root for a bundle copied under the target: `<dirname>/`."""
    name = Path(bundle_dir).resolve().name
    if not name:
        raise ValueError(f"subpackage root: cannot derive a name from {str(bundle_dir)!r}")
    return f"{name}/"


def page_module_path(bundle_root: Path | str, page: str) -> Path:
    """Compiled module file backing a manifest page (`<root>/<page>.js`)."""
    page = _norm_str(page, where="page")
    return Path(bundle_root).resolve() / f"{page}{MODULE_EXT}"
