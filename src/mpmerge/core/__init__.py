"""mpmerge core: data model, ancestor locator, injection and manifest merge.

This package is intentionally standalone and must not import cli/bundle/pipeline
to avoid circular dependencies.
"""

from __future__ import annotations

from .inject import inject_bootstrap, inject_require
from .locate import LocateResult, locate_ancestor
from .merge import MISSING, merge_manifest
from .model import (
    BOOTSTRAP_MODULE,
    MODULE_EXT,
    SubpackageDescriptor,
    normalize_pages,
    normalize_subpackages,
    page_module_path,
    subpackage_root_for,
)

__all__ = [
    "BOOTSTRAP_MODULE",
    "MISSING",
    "MODULE_EXT",
    "LocateResult",
    "SubpackageDescriptor",
    "inject_bootstrap",
    "inject_require",
    "locate_ancestor",
    "merge_manifest",
    "normalize_pages",
    "normalize_subpackages",
    "page_module_path",
    "subpackage_root_for",
]
