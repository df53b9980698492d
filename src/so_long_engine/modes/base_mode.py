"""Mode definitions and the event bus shared by the host and the engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional

from so_long_engine.buffer import CommentSyntax

if TYPE_CHECKING:  # pragma: no cover
    from so_long_engine.buffer import Buffer

ModeInit = Callable[["Buffer"], None]


@dataclass(frozen=True, slots=True)
class ModeDefinition:
    """A major mode: its symbol, the mode it derives from, and its setup."""

    name: str
    parent: Optional[str] = None
    comment_syntax: Optional[CommentSyntax] = None
    init: tuple[ModeInit, ...] = ()
    minor_modes: tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("mode name cannot be empty")
        if self.parent == self.name:
            raise ValueError(f"mode '{self.name}' cannot derive from itself")
        if any(not callable(step) for step in self.init):
            raise TypeError("mode init steps must be callable")


@dataclass(frozen=True, slots=True)
class MinorModeDefinition:
    """An independently togglable buffer feature."""

    name: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("minor mode name cannot be empty")


class ModeBus:
    """Minimal event bus letting the engine publish structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)
