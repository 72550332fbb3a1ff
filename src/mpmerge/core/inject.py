"""Bootstrap injection into a page module.

The page module gets `require("<rel>");` prepended, where `<rel>` is the
reference returned by the ancestor locator. A leading strict-mode directive
(`"use strict";` or `'use strict';`, at position zero only) is kept first.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from .locate import LocateResult, locate_ancestor
from .model import BOOTSTRAP_MODULE

logger = logging.getLogger(__name__)

_STRICT_PREFIX = re.compile(r"""^(['"]use strict['"];)?""")


def require_statement(relative_path: str) -> str:
    """Return `require("<relative_path>");`."""
    if not isinstance(relative_path, str) or not relative_path:
        raise ValueError("require: relative_path must be a non-empty string")
    # json.dumps gives a valid double-quoted JS string literal.
    return f"require({json.dumps(relative_path, ensure_ascii=False)});"


def inject_require(text: str, relative_path: str) -> str:
    """Insert a require statement after a leading strict-mode marker, or at the start."""
    if not isinstance(text, str):
        raise TypeError(f"inject_require: expected str, got {type(text).__name__}")
    stmt = require_statement(relative_path)
    return _STRICT_PREFIX.sub(lambda m: (m.group(1) or "") + stmt, text, count=1)


def inject_bootstrap(
    page_file: Path | str,
    boundary: Path | str,
    target_name: str = BOOTSTRAP_MODULE,
) -> LocateResult:
    """Patch `page_file` in place to require the nearest ancestor `target_name`.

    Returns the locator result. When nothing is found the file is left untouched.

    Raises:
        OSError: if the page module cannot be read or written.
    """
    page = Path(page_file)
    # newline="" on both ends keeps the module's line endings byte for byte.
    with page.open("r", encoding="utf-8", newline="") as f:
        text = f.read()

    result = locate_ancestor(page, target_name, boundary)
    if not result.found:
        return result

    with page.open("w", encoding="utf-8", newline="") as f:
        f.write(inject_require(text, result.relative_path))
    logger.debug("injected %s into %s", result.relative_path, page)
    return result
