"""Category-gated diagnostics driven by the ``MOS6502_DEBUG`` variable.

``MOS6502_DEBUG=cpu,loader`` enables those categories; ``all`` enables every
category. The variable is read once and cached; call ``reload_categories``
after changing it at runtime.
"""

from __future__ import annotations

import os
from typing import FrozenSet

ENV_VAR = "MOS6502_DEBUG"
WILDCARD = "all"

_enabled: FrozenSet[str] | None = None


def _parse(raw: str) -> FrozenSet[str]:
    return frozenset(name.strip().lower() for name in raw.split(",") if name.strip())


def _categories() -> FrozenSet[str]:
    global _enabled
    if _enabled is None:
        _enabled = _parse(os.environ.get(ENV_VAR, ""))
    return _enabled


def reload_categories() -> FrozenSet[str]:
    global _enabled
    _enabled = None
    return _categories()


def debug_enabled(category: str | None = None) -> bool:
    """Report whether ``category`` (or, without one, any category) is on."""

    enabled = _categories()
    if category is None or WILDCARD in enabled:
        return bool(enabled)
    return category.lower() in enabled


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[MOS6502][{category}] {message}")
