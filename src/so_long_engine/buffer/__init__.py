"""Buffer abstractions: document text, comment syntax, and override state."""

from .buffer import Buffer, BufferView
from .document import BufferDocument, Position
from .state import OverridePhase, OverrideState
from .syntax import CommentSyntax, skip_comments_forward

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferView",
    "CommentSyntax",
    "OverridePhase",
    "OverrideState",
    "Position",
    "skip_comments_forward",
]
