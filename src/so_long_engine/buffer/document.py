"""Core document data structures for so_long_engine buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

Position = Tuple[int, int]  # (row, column)


@dataclass(slots=True)
class BufferDocument:
    """Read-mostly text storage built on a simple list-of-lines model.

    A trailing newline is represented by a final empty line, so ``"a\\n"`` has
    two lines and the position ``(1, 0)`` is the end of the buffer.
    """

    _lines: List[str] = field(default_factory=lambda: [""])

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        lines = text.split("\n")
        return cls(_lines=[line.rstrip("\r") for line in lines])

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        collected = list(lines)
        return cls(_lines=collected or [""])

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def line_length(self, index: int, start_column: int = 0) -> int:
        """Distance from ``start_column`` to the end of line ``index``."""

        return max(len(self.get_line(index)) - start_column, 0)

    @property
    def end(self) -> Position:
        last = self.line_count - 1
        return (last, len(self._lines[last]))

    def at_end(self, position: Position) -> bool:
        row, col = position
        last = self.line_count - 1
        if row > last:
            return True
        return row == last and col >= len(self._lines[last])
