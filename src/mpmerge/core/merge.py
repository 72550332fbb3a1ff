"""Manifest merge: register a source bundle as a subpackage of a target manifest.

Rules:
- `subPackages` is normalized to a list first (absent/non-array -> []).
- The new entry is appended; existing entries keep their order and identity.
  Roots are not deduplicated.
- Source pages are copied verbatim; they become relative to the new root.
- With `propagate_preload`, the target `preloadRule` is replaced wholesale by
  the source value. When the source has no `preloadRule` (pass `MISSING`), the
  key is removed from the target.
- Every other key of the target manifest is carried over unmodified.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from .model import SubpackageDescriptor, normalize_pages, normalize_subpackages

logger = logging.getLogger(__name__)

# Marks a `preloadRule` key that is absent from the source manifest.
MISSING = object()


def merge_manifest(
    source_pages: Sequence[str],
    source_preload_rule: Any,
    target_manifest: Mapping[str, Any],
    *,
    subpackage_root: str,
    independent: bool = False,
    propagate_preload: bool = False,
) -> dict[str, Any]:
    """Return `target_manifest` with the source bundle appended to `subPackages`.

    The input mapping is not mutated; a shallow copy is returned.

    Raises:
        TypeError: if `target_manifest` is not a mapping.
        ValueError: for an invalid page list or subpackage root.
    """
    if not isinstance(target_manifest, Mapping):
        raise TypeError(f"merge_manifest: target_manifest must be a mapping, got {type(target_manifest).__name__}")

    descriptor = SubpackageDescriptor(
        root=subpackage_root,
        pages=tuple(normalize_pages(source_pages, where="source.pages")),
        independent=independent,
    )

    merged = dict(target_manifest)
    subpackages = normalize_subpackages(merged.get("subPackages"))
    subpackages.append(descriptor.to_json())
    merged["subPackages"] = subpackages

    if propagate_preload:
        if source_preload_rule is MISSING:
            merged.pop("preloadRule", None)
        else:
            merged["preloadRule"] = source_preload_rule

    logger.debug("appended subpackage %s (%d pages)", descriptor.root, len(descriptor.pages))
    return merged
