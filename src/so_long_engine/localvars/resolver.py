"""Host-side resolution of file-local variables."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from so_long_engine.buffer import Buffer
from so_long_engine.runtime import telemetry

from .block import LocalBlock, find_local_block
from .prop_line import PropLine, find_prop_line, prop_line_variables
from .values import LocalVariablesError

DEFAULT_INHIBIT_PATTERNS: tuple[str, ...] = (
    r"\.tar\Z",
    r"\.t[bg]z\Z",
    r"\.arc\Z",
    r"\.zip\Z",
    r"\.lzh\Z",
    r"\.lha\Z",
    r"\.zoo\Z",
    r"\.[jew]ar\Z",
    r"\.xpi\Z",
    r"\.rar\Z",
    r"\.7z\Z",
    r"\.sx[dmicw]\Z",
    r"\.odf\Z",
    r"\.diff\Z",
    r"\.patch\Z",
    r"\.t?[cx]\Z",
)

IGNORED_VARIABLES = frozenset({"mode", "eval", "coding"})


@dataclass(slots=True)
class LocalConfigResult:
    """What a local-variable pass found (and, unless query-only, applied)."""

    applied_mode: Optional[str] = None
    variables: Dict[str, Any] = field(default_factory=dict)
    query_only: bool = True


class LocalConfigResolver:
    """Reads the header line and trailing block of a buffer.

    ``resolve(buffer, query_only=True)`` only reports what it found;
    ``query_only=False`` also copies the variables onto the buffer.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        inhibit_patterns: Iterable[str] = DEFAULT_INHIBIT_PATTERNS,
        logger_name: str | None = "so_long_engine.localvars",
    ) -> None:
        self.enabled = enabled
        self._inhibit = tuple(re.compile(pattern) for pattern in inhibit_patterns)
        self._logger_name = logger_name

    def allows(self, buffer: Buffer) -> bool:
        """Whether local variables are honoured for ``buffer`` at all."""

        if not self.enabled:
            return False
        name = buffer.file_name
        if name and any(pattern.search(name) for pattern in self._inhibit):
            return False
        return True

    def prop_line(self, buffer: Buffer) -> Optional[PropLine]:
        if not self.allows(buffer):
            return None
        return find_prop_line(buffer.document)

    def resolve(self, buffer: Buffer, *, query_only: bool = True) -> LocalConfigResult:
        result = LocalConfigResult(query_only=query_only)
        if not self.allows(buffer):
            return result

        with telemetry.span(
            "localvars::resolve",
            logger_name=self._logger_name,
            component="localvars",
            metadata={"buffer": buffer.name, "query_only": query_only},
        ) as handle:
            header = find_prop_line(buffer.document)
            if header is not None:
                result.variables.update(self._read_header(buffer, header))
            block = self._read_block(buffer)
            if block is not None:
                for name, value in block.variables.items():
                    if name == "mode" and "mode" in result.variables:
                        continue
                    result.variables[name] = value

            mode = result.variables.get("mode")
            result.applied_mode = str(mode) if mode else None
            if result.applied_mode:
                handle.add_metadata("mode", result.applied_mode)

            if not query_only:
                for name, value in result.variables.items():
                    if name not in IGNORED_VARIABLES:
                        buffer.local_variables[name] = value
        return result

    def _read_header(self, buffer: Buffer, header: PropLine) -> Dict[str, Any]:
        try:
            return prop_line_variables(header)
        except LocalVariablesError as exc:
            telemetry.record_event(
                "localvars.malformed_header",
                level="warning",
                data={"buffer": buffer.name, "error": str(exc)},
                logger_name=self._logger_name,
            )
            return {}

    def _read_block(self, buffer: Buffer) -> Optional[LocalBlock]:
        try:
            return find_local_block(buffer.document)
        except LocalVariablesError as exc:
            telemetry.record_event(
                "localvars.malformed_block",
                level="warning",
                data={"buffer": buffer.name, "error": str(exc), "row": exc.row},
                logger_name=self._logger_name,
            )
            return None


__all__ = [
    "DEFAULT_INHIBIT_PATTERNS",
    "LocalConfigResolver",
    "LocalConfigResult",
]
