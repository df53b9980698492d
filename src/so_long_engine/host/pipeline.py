"""Middleware chains wrapped around host entry points."""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from so_long_engine.runtime import telemetry

T = TypeVar("T")

Handler = Callable[..., T]
Middleware = Callable[..., T]


class Pipeline(Generic[T]):
    """A terminal handler plus an ordered list of installed middlewares.

    Each middleware is called as ``middleware(call_next, *args, **kwargs)``
    and decides whether (and how) to delegate to ``call_next``. The most
    recently installed middleware runs outermost.
    """

    def __init__(self, name: str, terminal: Handler[T]) -> None:
        self.name = name
        self._terminal = terminal
        self._middlewares: list[Middleware[T]] = []

    def install(self, middleware: Middleware[T]) -> bool:
        """Add ``middleware``; returns ``False`` when it was already installed."""

        if middleware in self._middlewares:
            return False
        self._middlewares.append(middleware)
        telemetry.record_event(
            "pipeline.install",
            level="debug",
            data={"pipeline": self.name, "middleware": _label(middleware)},
        )
        return True

    def uninstall(self, middleware: Middleware[T]) -> bool:
        """Remove ``middleware``; returns ``False`` when it was not installed."""

        if middleware not in self._middlewares:
            return False
        self._middlewares.remove(middleware)
        telemetry.record_event(
            "pipeline.uninstall",
            level="debug",
            data={"pipeline": self.name, "middleware": _label(middleware)},
        )
        return True

    def installed(self, middleware: Middleware[T]) -> bool:
        return middleware in self._middlewares

    def __len__(self) -> int:
        return len(self._middlewares)

    def __call__(self, *args: Any, **kwargs: Any) -> T:
        handler: Handler[T] = self._terminal
        for middleware in self._middlewares:
            handler = _bind(middleware, handler)
        return handler(*args, **kwargs)


def _bind(middleware: Middleware[T], call_next: Handler[T]) -> Handler[T]:
    def handler(*args: Any, **kwargs: Any) -> T:
        return middleware(call_next, *args, **kwargs)

    return handler


def _label(middleware: Callable[..., Any]) -> str:
    return getattr(middleware, "__qualname__", repr(middleware))


__all__ = ["Handler", "Middleware", "Pipeline"]
