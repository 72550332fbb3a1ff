"""mpmerge bundle I/O (build output on disk).

- Read/write `app.json` manifests
- Load a bundle (root + manifest + page module paths)
- Clean, copy and build wrappers used by the merge pipeline
"""

from __future__ import annotations

from .io import Bundle, FilesystemError, copy_bundle, load_bundle, remove_files, remove_tree, run_build
from .manifest import ManifestError, ManifestParseError, parse_manifest, read_manifest, write_manifest

__all__ = [
    "Bundle",
    "FilesystemError",
    "ManifestError",
    "ManifestParseError",
    "copy_bundle",
    "load_bundle",
    "parse_manifest",
    "read_manifest",
    "remove_files",
    "remove_tree",
    "run_build",
    "write_manifest",
]
