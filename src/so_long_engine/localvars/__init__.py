"""File-local variables: the ``-*-`` header line and the trailing block."""

from .block import LocalBlock, find_local_block
from .prop_line import PropLine, declared_modes, find_prop_line, prop_line_variables
from .resolver import DEFAULT_INHIBIT_PATTERNS, LocalConfigResolver, LocalConfigResult
from .values import LocalVariablesError, mode_symbol, read_value

__all__ = [
    "DEFAULT_INHIBIT_PATTERNS",
    "LocalBlock",
    "LocalConfigResolver",
    "LocalConfigResult",
    "LocalVariablesError",
    "PropLine",
    "declared_modes",
    "find_local_block",
    "find_prop_line",
    "mode_symbol",
    "prop_line_variables",
    "read_value",
]
