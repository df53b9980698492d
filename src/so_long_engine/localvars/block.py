"""The trailing ``Local Variables:`` ... ``End:`` block."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from so_long_engine.buffer import BufferDocument

from .values import LocalVariablesError, mode_symbol, read_value

SEARCH_LIMIT = 3000
PAGE_DELIMITER = "\f"
_HEADER = re.compile(r"Local Variables:", re.IGNORECASE)
_ENTRY = re.compile(r"\s*([^\s:][^:]*?)\s*:(.*)\Z")


@dataclass(slots=True)
class LocalBlock:
    """Variables declared by a trailing block, in declaration order."""

    row: int
    prefix: str
    suffix: str
    variables: Dict[str, Any] = field(default_factory=dict)

    @property
    def mode(self) -> Optional[str]:
        value = self.variables.get("mode")
        return str(value) if value is not None else None


def _search_start(document: BufferDocument) -> tuple[int, int]:
    """First (row, column) of the region the block may live in."""

    budget = SEARCH_LIMIT
    row = document.line_count - 1
    while row >= 0:
        line = document.get_line(row)
        delimiter = line.rfind(PAGE_DELIMITER)
        if delimiter >= 0 and len(line) - delimiter <= budget:
            return row, delimiter + 1
        if len(line) + 1 > budget:
            return row, len(line) - budget
        budget -= len(line) + 1
        row -= 1
    return 0, 0


def find_local_block(document: BufferDocument) -> Optional[LocalBlock]:
    """Locate and parse the trailing block, or return ``None``.

    Raises :class:`LocalVariablesError` when a block opens but its entries
    are malformed (missing prefix/suffix, no ``End:``).
    """

    start_row, start_column = _search_start(document)
    for row in range(start_row, document.line_count):
        line = document.get_line(row)
        match = _HEADER.search(line, start_column if row == start_row else 0)
        if match is not None:
            prefix = line[: match.start()]
            suffix = line[match.end() :].strip()
            block = LocalBlock(row=row, prefix=prefix, suffix=suffix)
            _read_entries(document, block)
            return block
    return None


def _strip_affixes(line: str, block: LocalBlock, row: int) -> str:
    prefix = block.prefix
    if line.startswith(prefix):
        body = line[len(prefix) :]
    elif prefix.rstrip() and line.startswith(prefix.rstrip()):
        body = line[len(prefix.rstrip()) :]
    else:
        raise LocalVariablesError("local variables entry is missing the prefix", row=row)
    if block.suffix:
        trimmed = body.rstrip()
        if not trimmed.endswith(block.suffix):
            raise LocalVariablesError(
                "local variables entry is terminated incorrectly", row=row
            )
        body = trimmed[: -len(block.suffix)]
    return body


def _read_entries(document: BufferDocument, block: LocalBlock) -> None:
    for row in range(block.row + 1, document.line_count):
        body = _strip_affixes(document.get_line(row), block, row)
        if not body.strip():
            continue
        match = _ENTRY.match(body)
        if match is None:
            raise LocalVariablesError(f"malformed local variable {body.strip()!r}", row=row)
        name, raw = match.group(1), match.group(2)
        if name.lower() == "end":
            return
        if name.lower() == "mode":
            block.variables["mode"] = mode_symbol(raw)
        else:
            block.variables[name] = read_value(raw, row=row)
    raise LocalVariablesError("local variables list is not properly terminated", row=block.row)


__all__ = ["LocalBlock", "SEARCH_LIMIT", "find_local_block"]
