"""Protocols describing what the engine needs from its host editor."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from so_long_engine.buffer import Buffer, CommentSyntax
from so_long_engine.localvars import LocalConfigResult
from so_long_engine.modes import ModeBus

from .pipeline import Pipeline

AfterChangeListener = Callable[[Buffer], None]


class ModeHost(Protocol):
    """Mode registry, mode activation, and minor-mode toggling of a host."""

    bus: ModeBus
    mode_selection: Pipeline[str]
    local_config: Pipeline[LocalConfigResult]

    def parent_of(self, mode: str) -> Optional[str]:
        """Return the mode ``mode`` derives from, if any."""
        ...

    def activate(self, buffer: Buffer, mode: str) -> None:
        """Make ``mode`` the buffer's major mode and run its setup."""
        ...

    def comment_syntax(self, mode: Optional[str]) -> Optional[CommentSyntax]:
        ...

    def is_minor_mode_active(self, buffer: Buffer, name: str) -> bool:
        ...

    def set_minor_mode(self, buffer: Buffer, name: str, enabled: bool) -> None:
        ...

    def local_variables_enabled(self, buffer: Buffer) -> bool:
        """Whether the host honours file-local variables for ``buffer``."""
        ...

    def hack_local_variables(self, buffer: Buffer) -> LocalConfigResult:
        """Run a full (applying) local-variable pass."""
        ...

    def add_after_change_listener(self, listener: AfterChangeListener) -> bool:
        ...

    def remove_after_change_listener(self, listener: AfterChangeListener) -> bool:
        ...


__all__ = ["AfterChangeListener", "ModeHost"]
