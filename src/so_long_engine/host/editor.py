"""Reference in-process host: buffers, mode selection, and activation."""

from __future__ import annotations

import posixpath
import re
from typing import Dict, Iterable, Optional

from so_long_engine.buffer import Buffer, BufferDocument, CommentSyntax
from so_long_engine.localvars import LocalConfigResolver, LocalConfigResult
from so_long_engine.modes import DEFAULT_MODE, ModeBus, ModeRegistry, load_default_modes
from so_long_engine.modes.defaults import DEFAULT_AUTO_MODES, DEFAULT_INTERPRETERS
from so_long_engine.runtime import telemetry

from .pipeline import Pipeline
from .protocols import AfterChangeListener

DEFAULT_GLOBAL_MINOR_MODES: tuple[str, ...] = ("font-lock-mode",)


class EditorHost:
    """Owns buffers and decides which major mode each one starts in.

    Mode selection consults, in order: a mode declared by file-local
    variables (query-only pass), the ``#!`` interpreter, the file name, and
    finally ``default_mode``. Minor modes in ``global_minor_modes`` start
    enabled in every new buffer. Both selection and local-variable resolution
    are :class:`Pipeline` instances so integrations can wrap them.
    """

    def __init__(
        self,
        *,
        registry: ModeRegistry | None = None,
        resolver: LocalConfigResolver | None = None,
        auto_modes: Iterable[tuple[str, str]] = DEFAULT_AUTO_MODES,
        interpreters: Iterable[tuple[str, str]] = DEFAULT_INTERPRETERS,
        default_mode: str = DEFAULT_MODE,
        global_minor_modes: Iterable[str] = DEFAULT_GLOBAL_MINOR_MODES,
        bus: ModeBus | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.registry = registry or ModeRegistry(logger_name="so_long_engine.modes")
        if load_defaults and registry is None:
            load_default_modes(self.registry)
        self.resolver = resolver or LocalConfigResolver()
        self.bus = bus or ModeBus()
        self.default_mode = default_mode
        self.global_minor_modes = tuple(global_minor_modes)
        self._auto_modes = [(re.compile(pattern), mode) for pattern, mode in auto_modes]
        self._interpreters = [
            (re.compile(pattern + r"\Z"), mode) for pattern, mode in interpreters
        ]
        self.buffers: Dict[str, Buffer] = {}
        self.mode_selection: Pipeline[str] = Pipeline("mode_selection", self._select_mode)
        self.local_config: Pipeline[LocalConfigResult] = Pipeline(
            "local_config", self.resolver.resolve
        )
        self._after_change: list[AfterChangeListener] = []

    # buffers -------------------------------------------------------------

    def open_buffer(
        self, name: str, text: str, *, file_name: Optional[str] = None
    ) -> Buffer:
        """Create a buffer, select and activate its mode, apply its variables."""

        buffer = Buffer(
            name=name, file_name=file_name, document=BufferDocument.from_text(text)
        )
        buffer.minor_modes.update(
            minor
            for minor in self.global_minor_modes
            if self.registry.has_minor_mode(minor)
        )
        self.buffers[name] = buffer
        with telemetry.span(
            "host::open_buffer",
            logger_name="so_long_engine.host",
            component="host",
            metadata={"buffer": name, "lines": buffer.document.line_count},
        ):
            self.normal_mode(buffer)
        return buffer

    def kill_buffer(self, name: str) -> Optional[Buffer]:
        return self.buffers.pop(name, None)

    def normal_mode(self, buffer: Buffer) -> str:
        """Re-run mode selection and a full local-variable pass on ``buffer``."""

        mode = self.set_auto_mode(buffer)
        self.hack_local_variables(buffer)
        return mode

    # mode selection ------------------------------------------------------

    def set_auto_mode(self, buffer: Buffer) -> str:
        mode = self.mode_selection(buffer)
        if not self.registry.has_mode(mode):
            telemetry.record_event(
                "host.unknown_mode",
                level="warning",
                data={"buffer": buffer.name, "mode": mode},
            )
            mode = self.default_mode
        self.activate(buffer, mode)
        return mode

    def _select_mode(self, buffer: Buffer) -> str:
        declared = self.local_config(buffer, query_only=True).applied_mode
        if declared and self.registry.has_mode(declared):
            return declared
        return (
            self._mode_for_interpreter(buffer.document)
            or self._mode_for_file_name(buffer.file_name)
            or self.default_mode
        )

    def _mode_for_interpreter(self, document: BufferDocument) -> Optional[str]:
        first = document.get_line(0)
        if not first.startswith("#!"):
            return None
        words = first[2:].split()
        if not words:
            return None
        program = posixpath.basename(words[0])
        if program == "env" and len(words) > 1:
            program = posixpath.basename(words[1])
        for pattern, mode in self._interpreters:
            if pattern.match(program):
                return mode
        return None

    def _mode_for_file_name(self, file_name: Optional[str]) -> Optional[str]:
        if not file_name:
            return None
        for pattern, mode in self._auto_modes:
            if pattern.search(file_name):
                return mode
        return None

    # activation ----------------------------------------------------------

    def activate(self, buffer: Buffer, mode: str) -> None:
        definition = self.registry.get_mode(mode)
        lineage = [mode, *self.registry.ancestors(mode)]
        previous = buffer.major_mode
        buffer.major_mode = mode
        # a mode change drops the previous mode's buffer-local settings
        buffer.local_variables.clear()
        for name in reversed(lineage):
            ancestor = self.registry.get_mode(name)
            for minor in ancestor.minor_modes:
                if self.registry.has_minor_mode(minor):
                    buffer.minor_modes.add(minor)
        for step in definition.init:
            step(buffer)
        telemetry.record_event(
            "mode.activate",
            level="debug",
            data={"buffer": buffer.name, "mode": mode, "previous": previous},
        )
        for listener in list(self._after_change):
            listener(buffer)

    def add_after_change_listener(self, listener: AfterChangeListener) -> bool:
        if listener in self._after_change:
            return False
        self._after_change.append(listener)
        return True

    def remove_after_change_listener(self, listener: AfterChangeListener) -> bool:
        if listener not in self._after_change:
            return False
        self._after_change.remove(listener)
        return True

    # collaborator surface ------------------------------------------------

    def parent_of(self, mode: str) -> Optional[str]:
        return self.registry.parent_of(mode)

    def comment_syntax(self, mode: Optional[str]) -> Optional[CommentSyntax]:
        if mode is None or not self.registry.has_mode(mode):
            return None
        for name in (mode, *self.registry.ancestors(mode)):
            syntax = self.registry.get_mode(name).comment_syntax
            if syntax is not None:
                return syntax
        return None

    def is_minor_mode_active(self, buffer: Buffer, name: str) -> bool:
        return name in buffer.minor_modes

    def set_minor_mode(self, buffer: Buffer, name: str, enabled: bool) -> None:
        if not self.registry.has_minor_mode(name):
            raise KeyError(f"Minor mode '{name}' is not registered")
        if enabled:
            buffer.minor_modes.add(name)
        else:
            buffer.minor_modes.discard(name)
        self.bus.emit(
            "minor_mode.toggle",
            {"buffer": buffer.name, "minor_mode": name, "enabled": enabled},
        )

    def local_variables_enabled(self, buffer: Buffer) -> bool:
        return self.resolver.allows(buffer)

    def hack_local_variables(self, buffer: Buffer) -> LocalConfigResult:
        return self.local_config(buffer, query_only=False)


__all__ = ["DEFAULT_GLOBAL_MINOR_MODES", "EditorHost"]
