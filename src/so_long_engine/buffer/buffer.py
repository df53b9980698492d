"""Buffer façade combining document text, mode slots, and override state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .document import BufferDocument
from .state import OverridePhase, OverrideState


@dataclass(slots=True)
class BufferView:
    """Host-friendly snapshot describing a buffer's mode situation."""

    name: str
    major_mode: Optional[str]
    minor_modes: tuple[str, ...]
    read_only: bool
    line_count: int
    phase: OverridePhase
    original_mode: Optional[str]


class Buffer:
    def __init__(
        self,
        *,
        name: str = "*scratch*",
        file_name: Optional[str] = None,
        document: Optional[BufferDocument] = None,
        override: Optional[OverrideState] = None,
    ) -> None:
        self.name = name
        self.file_name = file_name
        self.document = document or BufferDocument()
        self.override = override or OverrideState()
        self.major_mode: Optional[str] = None
        self.minor_modes: set[str] = set()
        self.read_only = False
        self.local_variables: Dict[str, Any] = {}

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "*scratch*", file_name: Optional[str] = None
    ) -> "Buffer":
        return cls(name=name, file_name=file_name, document=BufferDocument.from_text(text))

    def snapshot(self) -> BufferView:
        return BufferView(
            name=self.name,
            major_mode=self.major_mode,
            minor_modes=tuple(sorted(self.minor_modes)),
            read_only=self.read_only,
            line_count=self.document.line_count,
            phase=self.override.phase,
            original_mode=self.override.original_mode,
        )

    def __repr__(self) -> str:
        return f"Buffer(name={self.name!r}, major_mode={self.major_mode!r})"
