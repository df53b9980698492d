"""Explicit mode declarations that veto an automatic override."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from so_long_engine.buffer import Buffer
from so_long_engine.localvars import LocalConfigResult, declared_modes, find_prop_line

if TYPE_CHECKING:  # pragma: no cover
    from so_long_engine.host import ModeHost


@dataclass(frozen=True, slots=True)
class InhibitionSignal:
    """Modes a file declared explicitly during the current pass."""

    modes: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.modes)


class OverridePolicy:
    """Feeds both declaration paths into ``buffer.override.inhibited``."""

    def check_header(self, host: "ModeHost", buffer: Buffer) -> InhibitionSignal:
        """Record modes declared on the ``-*-`` line, if local variables apply."""

        if not host.local_variables_enabled(buffer):
            return self.resolve_inhibition(buffer)
        prop_line = find_prop_line(buffer.document)
        if prop_line is not None:
            self._record(buffer, declared_modes(prop_line))
        return self.resolve_inhibition(buffer)

    def capture(self, buffer: Buffer, result: LocalConfigResult) -> InhibitionSignal:
        """Record a mode reported by a query-only local-variable pass."""

        if result.query_only and result.applied_mode:
            self._record(buffer, (result.applied_mode,))
        return self.resolve_inhibition(buffer)

    def resolve_inhibition(self, buffer: Buffer) -> InhibitionSignal:
        return InhibitionSignal(buffer.override.inhibited)

    @staticmethod
    def _record(buffer: Buffer, modes: Iterable[str]) -> None:
        current = buffer.override.inhibited
        fresh = tuple(mode for mode in modes if mode not in current)
        if fresh:
            buffer.override.inhibited = current + fresh


__all__ = ["InhibitionSignal", "OverridePolicy"]
