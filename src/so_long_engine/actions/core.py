"""Side-effect objects run after an override, and their isolated runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Literal, Optional

from so_long_engine.buffer import Buffer
from so_long_engine.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover
    from so_long_engine.host import ModeHost


class SideEffect:
    """Base class for post-override hooks.

    ``apply`` runs once the fallback mode is set up; ``restore`` undoes it when
    the buffer is reverted to its original mode.
    """

    name: str = "side_effect"

    def apply(self, host: "ModeHost", buffer: Buffer) -> None:  # pragma: no cover
        raise NotImplementedError

    def restore(self, host: "ModeHost", buffer: Buffer) -> None:
        del host, buffer


@dataclass(frozen=True, eq=False)
class CallableEffect(SideEffect):
    """Adapts a plain ``fn(host, buffer)`` callable into a side effect."""

    fn: Callable[["ModeHost", Buffer], None]
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError("fn must be callable")

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.label or getattr(self.fn, "__name__", "callable")

    def apply(self, host: "ModeHost", buffer: Buffer) -> None:
        self.fn(host, buffer)


def as_side_effect(hook: SideEffect | Callable[["ModeHost", Buffer], None]) -> SideEffect:
    if isinstance(hook, SideEffect):
        return hook
    if callable(hook):
        return CallableEffect(hook)
    raise TypeError(f"hook {hook!r} is neither a SideEffect nor callable")


@dataclass(frozen=True, slots=True)
class HookOutcome:
    name: str
    status: Literal["ok", "failed"]
    error: Optional[str] = None


def run_side_effects(
    effects: Iterable[SideEffect],
    host: "ModeHost",
    buffer: Buffer,
    *,
    restore: bool = False,
    logger_name: str | None = None,
) -> list[HookOutcome]:
    """Run every effect in order; a failing effect never stops the rest."""

    outcomes: list[HookOutcome] = []
    phase = "restore" if restore else "apply"
    for effect in effects:
        try:
            with telemetry.span(
                f"hooks::{phase}",
                logger_name=logger_name,
                component="hooks",
                metadata={"hook": effect.name, "buffer": buffer.name},
            ):
                if restore:
                    effect.restore(host, buffer)
                else:
                    effect.apply(host, buffer)
        except Exception as exc:  # hooks are user code
            telemetry.record_event(
                "hooks.failed",
                level="error",
                data={"hook": effect.name, "phase": phase, "error": repr(exc)},
                logger_name=logger_name,
            )
            outcomes.append(HookOutcome(effect.name, "failed", repr(exc)))
        else:
            outcomes.append(HookOutcome(effect.name, "ok"))
    return outcomes


__all__ = [
    "CallableEffect",
    "HookOutcome",
    "SideEffect",
    "as_side_effect",
    "run_side_effects",
]
