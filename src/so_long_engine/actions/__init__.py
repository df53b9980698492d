"""Post-override side effects (minor-mode suppression, read-only) and runner."""

from .core import CallableEffect, HookOutcome, SideEffect, as_side_effect, run_side_effects
from .minor_modes import (
    DisableMinorMode,
    InhibitWhitespaceMode,
    restore_minor_modes,
    suppress_minor_modes,
)
from .read_only import MakeBufferReadOnly

__all__ = [
    "CallableEffect",
    "DisableMinorMode",
    "HookOutcome",
    "InhibitWhitespaceMode",
    "MakeBufferReadOnly",
    "SideEffect",
    "as_side_effect",
    "restore_minor_modes",
    "run_side_effects",
    "suppress_minor_modes",
]
