"""User-facing options and the immutable per-pass configuration snapshot."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Iterable, Mapping, Optional

from so_long_engine.actions import (
    InhibitWhitespaceMode,
    MakeBufferReadOnly,
    SideEffect,
    as_side_effect,
)
from so_long_engine.modes import FALLBACK_MODE
from so_long_engine.runtime import telemetry

ENV_PREFIX = "SO_LONG_"

DEFAULT_THRESHOLD = 250
DEFAULT_MAX_LINES = 5
DEFAULT_TARGET_MODES: frozenset[str] = frozenset({"prog-mode", "css-mode"})
DEFAULT_MINOR_MODES: tuple[str, ...] = (
    "font-lock-mode",
    "display-line-numbers-mode",
    "linum-mode",
    "nlinum-mode",
    "prettify-symbols-mode",
    "visual-line-mode",
    "highlight-changes-mode",
    "highlight-changes-visible-mode",
    "hi-lock-mode",
)


def default_hooks() -> tuple[SideEffect, ...]:
    return (InhibitWhitespaceMode(), MakeBufferReadOnly())


class ConfigurationError(ValueError):
    """Raised when an option is unknown or holds an unusable value."""

    def __init__(self, message: str, *, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


def _count(option: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"{option} must be an integer, got {value!r}", option=option
        )
    if value < 0:
        raise ConfigurationError(f"{option} cannot be negative", option=option)
    return value


def _ordered_unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(str(value) for value in values if str(value)))


@dataclass(frozen=True, slots=True)
class Configuration:
    """Snapshot of every option the controller reads during one pass."""

    enabled: bool = True
    threshold: int = DEFAULT_THRESHOLD
    max_lines: int = DEFAULT_MAX_LINES
    target_modes: frozenset[str] = DEFAULT_TARGET_MODES
    minor_modes: tuple[str, ...] = DEFAULT_MINOR_MODES
    hooks: tuple[SideEffect, ...] = field(default_factory=default_hooks)
    fallback_mode: str = FALLBACK_MODE

    def __post_init__(self) -> None:
        object.__setattr__(self, "enabled", bool(self.enabled))
        object.__setattr__(self, "threshold", _count("threshold", self.threshold))
        object.__setattr__(self, "max_lines", _count("max_lines", self.max_lines))
        if isinstance(self.target_modes, str):
            raise ConfigurationError(
                "target_modes must be a collection of mode names", option="target_modes"
            )
        object.__setattr__(self, "target_modes", frozenset(self.target_modes))
        if isinstance(self.minor_modes, str):
            raise ConfigurationError(
                "minor_modes must be a collection of mode names", option="minor_modes"
            )
        object.__setattr__(self, "minor_modes", _ordered_unique(self.minor_modes))
        try:
            hooks = tuple(as_side_effect(hook) for hook in self.hooks)
        except TypeError as exc:
            raise ConfigurationError(str(exc), option="hooks") from exc
        object.__setattr__(self, "hooks", hooks)
        if not self.fallback_mode:
            raise ConfigurationError("fallback_mode cannot be empty", option="fallback_mode")


OPTION_NAMES = frozenset(item.name for item in fields(Configuration))


def _split(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _flag(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _integer(option: str) -> Callable[[str], int]:
    def parse(raw: str) -> int:
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise ConfigurationError(
                f"{option} must be an integer, got {raw!r}", option=option
            ) from exc

    return parse


_ENV_OPTIONS: Mapping[str, tuple[str, Callable[[str], Any]]] = {
    "ENABLED": ("enabled", _flag),
    "THRESHOLD": ("threshold", _integer("threshold")),
    "MAX_LINES": ("max_lines", _integer("max_lines")),
    "TARGET_MODES": ("target_modes", _split),
    "MINOR_MODES": ("minor_modes", _split),
    "FALLBACK_MODE": ("fallback_mode", str.strip),
}


class Settings:
    """The single long-lived, user-mutable home of the options.

    The controller never reads ``Settings`` mid-pass; it takes a
    :meth:`snapshot` at the start of each pass.
    """

    def __init__(self, configuration: Optional[Configuration] = None) -> None:
        self._current = configuration or Configuration()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        for suffix, (option, parse) in _ENV_OPTIONS.items():
            raw = env.get(f"{ENV_PREFIX}{suffix}")
            if raw is not None:
                changes[option] = parse(raw)
        settings = cls()
        if changes:
            settings.update(**changes)
        return settings

    def snapshot(self) -> Configuration:
        return self._current

    def update(self, **changes: Any) -> Configuration:
        unknown = sorted(set(changes) - OPTION_NAMES)
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s): {', '.join(unknown)}", option=unknown[0]
            )
        self._current = replace(self._current, **changes)
        telemetry.record_event(
            "settings.update",
            level="debug",
            data={key: value for key, value in changes.items() if key != "hooks"},
        )
        return self._current

    def reset(self) -> Configuration:
        self._current = Configuration()
        return self._current

    @property
    def enabled(self) -> bool:
        return self._current.enabled


__all__ = [
    "Configuration",
    "ConfigurationError",
    "DEFAULT_MAX_LINES",
    "DEFAULT_MINOR_MODES",
    "DEFAULT_TARGET_MODES",
    "DEFAULT_THRESHOLD",
    "OPTION_NAMES",
    "Settings",
    "default_hooks",
]
