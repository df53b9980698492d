"""Per-buffer override bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class OverridePhase(str, Enum):
    """Where a buffer sits in the override state machine."""

    UNEVALUATED = "unevaluated"
    INHIBITED = "inhibited"
    NO_OVERRIDE = "no_override"
    OVERRIDDEN = "overridden"
    REVERTED = "reverted"


@dataclass(slots=True)
class OverrideState:
    """Mutable override flags owned by a single buffer.

    ``original_mode`` survives mode changes inside the buffer until a revert;
    ``inhibited`` and ``pending_hooks`` are cleared by :meth:`begin_pass`.
    """

    original_mode: Optional[str] = None
    inhibited: tuple[str, ...] = ()
    pending_hooks: bool = False
    phase: OverridePhase = OverridePhase.UNEVALUATED
    suppressed_minor_modes: list[str] = field(default_factory=list)
    previous_read_only: Optional[bool] = None

    def begin_pass(self) -> None:
        self.inhibited = ()
        self.pending_hooks = False
        self.phase = OverridePhase.UNEVALUATED

    def clear_history(self) -> None:
        self.original_mode = None
        self.pending_hooks = False
        self.suppressed_minor_modes.clear()
        self.previous_read_only = None
