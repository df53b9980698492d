"""Bounded search for an excessively long line near the top of a buffer."""

from __future__ import annotations

from typing import Callable, Optional

from so_long_engine.buffer import (
    BufferDocument,
    CommentSyntax,
    Position,
    skip_comments_forward,
)

SkipForward = Callable[[BufferDocument, Optional[CommentSyntax]], Position]


def detect_long_line(
    document: BufferDocument,
    max_lines: int,
    threshold: int,
    *,
    syntax: Optional[CommentSyntax] = None,
    skip: SkipForward = skip_comments_forward,
) -> bool:
    """True if one of the first ``max_lines`` lines is longer than ``threshold``.

    Counting starts after the leading comments and blank lines; the first
    counted line is measured from where the skip stopped. No line past the
    ``max_lines``-th counted one is read.
    """

    if max_lines <= 0:
        return False
    row, column = skip(document, syntax)
    checked = 0
    while checked < max_lines and not document.at_end((row, column)):
        if document.line_length(row, column) > threshold:
            return True
        row, column = row + 1, 0
        checked += 1
    return False


__all__ = ["SkipForward", "detect_long_line"]
