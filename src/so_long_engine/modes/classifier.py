"""Target-mode membership along the mode inheritance chain."""

from __future__ import annotations

from typing import AbstractSet, Callable, Optional

ParentLookup = Callable[[str], Optional[str]]


def is_target_mode(
    mode: Optional[str], target_modes: AbstractSet[str], parent_of: ParentLookup
) -> bool:
    """True when ``mode`` or one of its ancestors is in ``target_modes``."""

    seen: set[str] = set()
    current = mode
    while current is not None and current not in seen:
        if current in target_modes:
            return True
        seen.add(current)
        current = parent_of(current)
    return False


__all__ = ["ParentLookup", "is_target_mode"]
