"""Reader for the small value language used in file-local variables."""

from __future__ import annotations

import re
from typing import Any

_INTEGER = re.compile(r"[-+]?\d+\Z")
_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


class LocalVariablesError(ValueError):
    """Raised for malformed local-variable declarations."""

    def __init__(self, message: str, *, row: int | None = None) -> None:
        super().__init__(message)
        self.row = row


def _read_string(raw: str, row: int | None) -> str:
    out: list[str] = []
    index = 1
    while index < len(raw):
        char = raw[index]
        if char == "\\":
            index += 1
            if index >= len(raw):
                break
            out.append(_ESCAPES.get(raw[index], raw[index]))
        elif char == '"':
            if raw[index + 1 :].strip():
                raise LocalVariablesError("trailing text after string value", row=row)
            return "".join(out)
        else:
            out.append(char)
        index += 1
    raise LocalVariablesError("unterminated string value", row=row)


def read_value(raw: str, *, row: int | None = None) -> Any:
    """Interpret ``raw`` as a string literal, integer, ``t``/``nil`` or symbol."""

    text = raw.strip()
    if not text:
        raise LocalVariablesError("missing value", row=row)
    if text.startswith('"'):
        return _read_string(text, row)
    if _INTEGER.match(text):
        return int(text)
    if text == "t":
        return True
    if text == "nil":
        return False
    return text


def mode_symbol(token: str) -> str:
    """``Python`` -> ``python-mode``. The suffix is always appended."""

    return f"{token.strip().lower()}-mode"
