"""Comment syntax descriptions and the forward comment/whitespace skipper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .document import BufferDocument, Position

_BLANKS = " \t\f\v\r"


@dataclass(frozen=True, slots=True)
class CommentSyntax:
    """Comment delimiters understood by a major mode."""

    line_starts: tuple[str, ...] = ()
    blocks: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if any(not prefix for prefix in self.line_starts):
            raise ValueError("line comment prefixes cannot be empty")
        for opener, closer in self.blocks:
            if not opener or not closer:
                raise ValueError("block comment delimiters cannot be empty")

    def line_comment_at(self, line: str, column: int) -> bool:
        return any(line.startswith(prefix, column) for prefix in self.line_starts)

    def block_opened_at(self, line: str, column: int) -> Optional[tuple[str, str]]:
        for opener, closer in self.blocks:
            if line.startswith(opener, column):
                return opener, closer
        return None


def _skip_blanks(line: str, column: int) -> int:
    while column < len(line) and line[column] in _BLANKS:
        column += 1
    return column


def _close_block(
    document: BufferDocument, row: int, column: int, closer: str
) -> Position:
    while row < document.line_count:
        found = document.get_line(row).find(closer, column)
        if found >= 0:
            return (row, found + len(closer))
        row, column = row + 1, 0
    return document.end


def skip_comments_forward(
    document: BufferDocument, syntax: Optional[CommentSyntax] = None
) -> Position:
    """Move past the leading run of blank lines and comments.

    Returns the position of the first character that is neither whitespace
    nor inside a comment, or the end of the buffer. Without a ``syntax`` only
    whitespace is skipped. An unterminated block comment runs to the end of
    the buffer.
    """

    row, column = 0, 0
    last = document.line_count - 1
    while row <= last:
        line = document.get_line(row)
        column = _skip_blanks(line, column)
        if column >= len(line) or (
            syntax is not None and syntax.line_comment_at(line, column)
        ):
            if row == last:
                return (row, len(line))
            row, column = row + 1, 0
            continue
        block = syntax.block_opened_at(line, column) if syntax else None
        if block is None:
            return (row, column)
        opener, closer = block
        row, column = _close_block(document, row, column + len(opener), closer)
    return document.end


__all__ = ["CommentSyntax", "skip_comments_forward"]
