"""Override state machine wrapped around the host's mode selection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional
from weakref import WeakKeyDictionary

from so_long_engine.actions import (
    restore_minor_modes,
    run_side_effects,
    suppress_minor_modes,
)
from so_long_engine.buffer import Buffer, OverridePhase
from so_long_engine.localvars import LocalConfigResult
from so_long_engine.modes import DEFAULT_MODE, is_target_mode
from so_long_engine.runtime import telemetry

from .config import Configuration, Settings
from .policy import OverridePolicy
from .scanner import detect_long_line

if TYPE_CHECKING:  # pragma: no cover
    from so_long_engine.host import ModeHost

LOGGER_NAME = "so_long_engine.controller"


class NoOriginalModeError(RuntimeError):
    """Raised when reverting a buffer that holds no recorded original mode."""

    def __init__(self, buffer_name: str) -> None:
        super().__init__("no original mode recorded")
        self.buffer_name = buffer_name


class OverrideController:
    """Decides per buffer whether the fallback mode replaces the host's choice.

    ``enable()`` installs :meth:`select_mode` on the host's mode-selection
    pipeline, :meth:`capture_local_config` on its local-variable pipeline, and
    :meth:`after_mode_change` as an activation listener. ``disable()`` removes
    all three.
    """

    def __init__(
        self,
        host: "ModeHost",
        settings: Optional[Settings] = None,
        *,
        policy: Optional[OverridePolicy] = None,
        scanner: Callable[..., bool] = detect_long_line,
        logger_name: str | None = LOGGER_NAME,
    ) -> None:
        self.host = host
        self.settings = settings or Settings()
        self.policy = policy or OverridePolicy()
        self._scan = scanner
        self._logger_name = logger_name
        self._override_config: "WeakKeyDictionary[Buffer, Configuration]" = (
            WeakKeyDictionary()
        )

    # install / uninstall -------------------------------------------------

    def enable(self) -> None:
        self.host.mode_selection.install(self.select_mode)
        self.host.local_config.install(self.capture_local_config)
        self.host.add_after_change_listener(self.after_mode_change)

    def disable(self) -> None:
        self.host.mode_selection.uninstall(self.select_mode)
        self.host.local_config.uninstall(self.capture_local_config)
        self.host.remove_after_change_listener(self.after_mode_change)

    @property
    def enabled(self) -> bool:
        return self.host.mode_selection.installed(self.select_mode)

    # middleware ----------------------------------------------------------

    def capture_local_config(
        self,
        call_next: Callable[..., LocalConfigResult],
        buffer: Buffer,
        *,
        query_only: bool = True,
    ) -> LocalConfigResult:
        result = call_next(buffer, query_only=query_only)
        if self.settings.enabled:
            self.policy.capture(buffer, result)
        return result

    def select_mode(self, call_next: Callable[[Buffer], str], buffer: Buffer) -> str:
        state = buffer.override
        state.begin_pass()
        config = self.settings.snapshot()
        if not config.enabled:
            state.phase = OverridePhase.NO_OVERRIDE
            selected = call_next(buffer)
            self._drop_stale_override(buffer)
            return selected

        self._guarded(
            buffer, "header", lambda: self.policy.check_header(self.host, buffer)
        )
        selected = call_next(buffer)

        with telemetry.span(
            "so_long::decide",
            logger_name=self._logger_name,
            component="so_long",
            metadata={"buffer": buffer.name, "selected": selected},
        ) as handle:
            phase = self._guarded(
                buffer, "decide", lambda: self._decide(config, buffer, selected)
            )
            phase = phase or OverridePhase.NO_OVERRIDE
            handle.add_metadata("phase", phase.value)
        state.phase = phase
        self._drop_stale_override(buffer)

        if phase is OverridePhase.INHIBITED:
            self._emit("so_long.inhibited", buffer, modes=list(state.inhibited))
            return selected
        if phase is not OverridePhase.OVERRIDDEN:
            return selected

        state.original_mode = selected
        state.pending_hooks = True
        self._override_config[buffer] = config
        self._emit("so_long.override", buffer, original_mode=selected)
        return config.fallback_mode

    def _decide(
        self, config: Configuration, buffer: Buffer, selected: str
    ) -> OverridePhase:
        if self.policy.resolve_inhibition(buffer):
            return OverridePhase.INHIBITED
        if selected == config.fallback_mode:
            return OverridePhase.NO_OVERRIDE
        if not is_target_mode(selected, config.target_modes, self.host.parent_of):
            return OverridePhase.NO_OVERRIDE
        found = self._scan(
            buffer.document,
            config.max_lines,
            config.threshold,
            syntax=self.host.comment_syntax(selected),
        )
        return OverridePhase.OVERRIDDEN if found else OverridePhase.NO_OVERRIDE

    def _guarded(self, buffer: Buffer, step: str, action: Callable[[], Any]) -> Any:
        try:
            return action()
        except Exception as exc:  # the pass must always yield a mode
            telemetry.record_event(
                "so_long.step_failed",
                level="error",
                data={"buffer": buffer.name, "step": step, "error": repr(exc)},
                logger_name=self._logger_name,
            )
            return None

    # post-override phase -------------------------------------------------

    def after_mode_change(self, buffer: Buffer) -> None:
        state = buffer.override
        if not state.pending_hooks:
            return
        config = self._override_config.get(buffer) or self.settings.snapshot()
        if buffer.major_mode != config.fallback_mode:
            return
        state.pending_hooks = False
        self._run_post_override(config, buffer)

    def _run_post_override(self, config: Configuration, buffer: Buffer) -> None:
        with telemetry.span(
            "so_long::post_override",
            logger_name=self._logger_name,
            component="so_long",
            metadata={"buffer": buffer.name},
        ):
            disabled = self._guarded(
                buffer,
                "minor_modes",
                lambda: suppress_minor_modes(self.host, buffer, config.minor_modes),
            )
            outcomes = run_side_effects(
                config.hooks, self.host, buffer, logger_name=self._logger_name
            )
        self._emit(
            "so_long.hooks",
            buffer,
            disabled_minor_modes=list(disabled or ()),
            hooks=[(outcome.name, outcome.status) for outcome in outcomes],
        )

    # user commands -------------------------------------------------------

    def revert(self, buffer: Buffer) -> str:
        """Restore the mode the override replaced and re-read local variables."""

        state = buffer.override
        original = state.original_mode
        if original is None:
            telemetry.record_event(
                "so_long.revert_without_history",
                level="warning",
                data={"buffer": buffer.name},
                logger_name=self._logger_name,
            )
            raise NoOriginalModeError(buffer.name)

        with telemetry.span(
            "so_long::revert",
            logger_name=self._logger_name,
            component="so_long",
            metadata={"buffer": buffer.name, "original": original},
        ):
            state.pending_hooks = False
            self.host.activate(buffer, original)
            self._undo_override(buffer)
            state.phase = OverridePhase.REVERTED
            self.host.hack_local_variables(buffer)
        self._emit("so_long.revert", buffer, mode=original)
        return original

    def _undo_override(self, buffer: Buffer) -> None:
        """Run the hooks' restore step and re-enable suppressed minor modes.

        Hooks come from the configuration recorded when the override was
        applied, not from the current settings.
        """

        config = self._override_config.pop(buffer, None) or self.settings.snapshot()
        run_side_effects(
            tuple(reversed(config.hooks)),
            self.host,
            buffer,
            restore=True,
            logger_name=self._logger_name,
        )
        restore_minor_modes(self.host, buffer)
        buffer.override.clear_history()

    def _drop_stale_override(self, buffer: Buffer) -> None:
        original = buffer.override.original_mode
        if original is None:
            return
        self._undo_override(buffer)
        telemetry.record_event(
            "so_long.override_dropped",
            data={"buffer": buffer.name, "original_mode": original},
            logger_name=self._logger_name,
        )

    def force(self, buffer: Buffer) -> bool:
        """Switch ``buffer`` to the fallback mode without running detection.

        Returns ``False`` when the buffer already is in the fallback mode.
        """

        config = self.settings.snapshot()
        if buffer.major_mode == config.fallback_mode:
            return False
        state = buffer.override
        state.original_mode = buffer.major_mode or DEFAULT_MODE
        state.pending_hooks = True
        state.phase = OverridePhase.OVERRIDDEN
        self._override_config[buffer] = config
        self._emit(
            "so_long.override", buffer, original_mode=state.original_mode, forced=True
        )
        self.host.activate(buffer, config.fallback_mode)
        if state.pending_hooks:
            state.pending_hooks = False
            self._run_post_override(config, buffer)
        return True

    def _emit(self, event: str, buffer: Buffer, **data: object) -> None:
        payload = {"buffer": buffer.name, **data}
        telemetry.record_event(event, data=payload, logger_name=self._logger_name)
        self.host.bus.emit(event, payload)


__all__ = ["NoOriginalModeError", "OverrideController"]
