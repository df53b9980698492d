"""The ``-*- ... -*-`` header line.

Grammar, as hosts that honour file headers expect it:

* leading spaces, tabs and newlines are skipped;
* the opening ``-*-`` must sit on that first non-blank line, or on the line
  after it when the first line starts with ``#!`` or ``'\\"``;
* the closing ``-*-`` must sit on the same line as the opening one;
* a body containing ``:`` is a ``var: value;`` list, otherwise the whole
  body names a single mode;
* an empty ``mode:`` value still declares a mode, the symbol ``-mode``,
  while an empty body declares nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from so_long_engine.buffer import BufferDocument

from .values import LocalVariablesError, mode_symbol, read_value

MARKER = "-*-"
MAGIC_PREFIXES = ("#!", "'\\\"")
_MODE_ENTRY = re.compile(r"[ \t;]mode:", re.IGNORECASE)
_BLANKS = " \t"


@dataclass(frozen=True, slots=True)
class PropLine:
    """Location and body text of a header line."""

    row: int
    start: int
    end: int
    body: str

    @property
    def has_variables(self) -> bool:
        return ":" in self.body


def _first_non_blank(document: BufferDocument) -> Optional[tuple[int, int]]:
    for row in range(document.line_count):
        line = document.get_line(row)
        column = len(line) - len(line.lstrip(_BLANKS))
        if column < len(line):
            return row, column
    return None


def find_prop_line(document: BufferDocument) -> Optional[PropLine]:
    start = _first_non_blank(document)
    if start is None:
        return None
    row, column = start
    candidates = [row]
    if column == 0 and document.get_line(row).startswith(MAGIC_PREFIXES, 0):
        if row + 1 < document.line_count:
            candidates.append(row + 1)

    for index, candidate in enumerate(candidates):
        line = document.get_line(candidate)
        opening = line.find(MARKER, column if index == 0 else 0)
        if opening < 0:
            continue
        body_start = opening + len(MARKER)
        while body_start < len(line) and line[body_start] in _BLANKS:
            body_start += 1
        closing = line.find(MARKER, body_start)
        if closing < 0:
            return None
        body_end = closing
        while body_end > body_start and line[body_end - 1] in _BLANKS:
            body_end -= 1
        return PropLine(
            row=candidate,
            start=body_start,
            end=body_end,
            body=line[body_start:body_end],
        )
    return None


def declared_modes(prop_line: PropLine) -> tuple[str, ...]:
    """Mode symbols named by the header, in the order they appear."""

    body = prop_line.body
    if not prop_line.has_variables:
        return (mode_symbol(body),) if body else ()

    modes: list[str] = []
    position = 0
    while True:
        if body[position : position + 5].lower() == "mode:":
            value_start = position + 5
        else:
            match = _MODE_ENTRY.search(body, position)
            if match is None:
                break
            value_start = match.end()
        while value_start < len(body) and body[value_start] in _BLANKS:
            value_start += 1
        separator = body.find(";", value_start)
        value_end = separator if separator >= 0 else len(body)
        value = body[value_start:value_end].rstrip(_BLANKS)
        modes.append(mode_symbol(value))
        position = value_start + len(value)
        if position >= len(body):
            break
    return tuple(modes)


def prop_line_variables(prop_line: PropLine) -> Dict[str, Any]:
    """All ``var: value`` pairs of the header; ``mode`` holds a mode symbol.

    Repeated ``mode:`` entries keep the first one as ``mode``.
    """

    if not prop_line.has_variables:
        return {"mode": mode_symbol(prop_line.body)} if prop_line.body else {}

    variables: Dict[str, Any] = {}
    for entry in prop_line.body.split(";"):
        if not entry.strip():
            continue
        name, colon, raw = entry.partition(":")
        name = name.strip()
        if not colon or not name:
            raise LocalVariablesError(
                f"malformed header entry {entry.strip()!r}", row=prop_line.row
            )
        if name.lower() == "mode":
            variables.setdefault("mode", mode_symbol(raw))
            continue
        variables[name] = read_value(raw, row=prop_line.row)
    return variables


__all__ = ["PropLine", "declared_modes", "find_prop_line", "prop_line_variables"]
