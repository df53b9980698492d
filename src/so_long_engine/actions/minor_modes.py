"""Turning minor modes off for an overridden buffer, and back on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from so_long_engine.buffer import Buffer

from .core import SideEffect

if TYPE_CHECKING:  # pragma: no cover
    from so_long_engine.host import ModeHost


def suppress_minor_modes(
    host: "ModeHost", buffer: Buffer, names: Iterable[str]
) -> list[str]:
    """Disable each active minor mode in ``names``; inactive ones are skipped.

    Disabled modes are remembered on the buffer's override state.
    """

    disabled: list[str] = []
    suppressed = buffer.override.suppressed_minor_modes
    for name in names:
        if not host.is_minor_mode_active(buffer, name):
            continue
        host.set_minor_mode(buffer, name, False)
        disabled.append(name)
        if name not in suppressed:
            suppressed.append(name)
    return disabled


def restore_minor_modes(host: "ModeHost", buffer: Buffer) -> list[str]:
    restored: list[str] = []
    suppressed = buffer.override.suppressed_minor_modes
    for name in suppressed:
        if not host.is_minor_mode_active(buffer, name):
            host.set_minor_mode(buffer, name, True)
            restored.append(name)
    suppressed.clear()
    return restored


@dataclass(frozen=True, slots=True)
class DisableMinorMode(SideEffect):
    """Hook that switches one minor mode off when it is active."""

    minor_mode: str

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"disable:{self.minor_mode}"

    def apply(self, host: "ModeHost", buffer: Buffer) -> None:
        suppress_minor_modes(host, buffer, (self.minor_mode,))


@dataclass(frozen=True)
class InhibitWhitespaceMode(DisableMinorMode):
    """Turns off whitespace visualisation, which is costly on long lines."""

    minor_mode: str = "whitespace-mode"


__all__ = [
    "DisableMinorMode",
    "InhibitWhitespaceMode",
    "restore_minor_modes",
    "suppress_minor_modes",
]
