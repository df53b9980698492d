"""Read-only protection for overridden buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from so_long_engine.buffer import Buffer

from .core import SideEffect

if TYPE_CHECKING:  # pragma: no cover
    from so_long_engine.host import ModeHost


@dataclass(frozen=True)
class MakeBufferReadOnly(SideEffect):
    """Marks the buffer read-only; keep it last in the hook sequence."""

    name = "make_buffer_read_only"

    def apply(self, host: "ModeHost", buffer: Buffer) -> None:
        del host
        if buffer.override.previous_read_only is None:
            buffer.override.previous_read_only = buffer.read_only
        buffer.read_only = True

    def restore(self, host: "ModeHost", buffer: Buffer) -> None:
        del host
        previous = buffer.override.previous_read_only
        if previous is not None:
            buffer.read_only = previous
            buffer.override.previous_read_only = None
