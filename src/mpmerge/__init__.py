"""mpmerge: merge a mini-program build output into another as a subpackage.

The source bundle is copied into the target bundle, registered in the target
`app.json` under `subPackages`, and its entry page is patched to `require()`
the source `app.js` so app-level bootstrap code still runs.
"""

from __future__ import annotations

from mpmerge.core import SubpackageDescriptor, locate_ancestor, merge_manifest

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SubpackageDescriptor",
    "locate_ancestor",
    "merge_manifest",
]
