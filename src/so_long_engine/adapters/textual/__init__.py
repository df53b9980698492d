"""Textual host surface for the so-long engine."""

from .controller import SO_LONG_EVENTS, TextualSoLongAdapter, TextualUIHooks

__all__ = ["SO_LONG_EVENTS", "TextualSoLongAdapter", "TextualUIHooks"]
