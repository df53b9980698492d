"""Adapter that surfaces override decisions through UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from so_long_engine.buffer import Buffer, BufferView
from so_long_engine.engine import NoOriginalModeError
from so_long_engine.session import Session

SO_LONG_EVENTS = (
    "so_long.inhibited",
    "so_long.override",
    "so_long.hooks",
    "so_long.revert",
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[BufferView], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualSoLongAdapter:
    """Bridges a :class:`Session` and its bus events to a UI surface."""

    def __init__(self, session: Session, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self.buffer: Optional[Buffer] = None
        self._subscriptions: Dict[str, Callable[[object], None]] = {}
        for event in SO_LONG_EVENTS:
            callback = self._relay(event)
            session.host.bus.subscribe(event, callback)
            self._subscriptions[event] = callback

    def close(self) -> None:
        """Stop relaying engine events to the UI hooks."""

        for event, callback in self._subscriptions.items():
            self.session.host.bus.unsubscribe(event, callback)
        self._subscriptions.clear()

    def _relay(self, name: str) -> Callable[[object], None]:
        def callback(payload: object) -> None:
            self._handle_event(name, payload)

        return callback

    def open_file(self, path: str) -> Buffer:
        return self._show(self.session.open_file(path))

    def open_text(self, name: str, text: str, *, file_name: str | None = None) -> Buffer:
        return self._show(self.session.open_text(name, text, file_name=file_name))

    def revert(self) -> Optional[str]:
        """Revert the current buffer; a missing history is reported, not raised."""

        if self.buffer is None:
            return None
        try:
            mode = self.session.controller.revert(self.buffer)
        except NoOriginalModeError as exc:
            self.hooks.update_status(f"so-long: {exc}")
            return None
        self._refresh()
        return mode

    def force(self) -> bool:
        if self.buffer is None:
            return False
        changed = self.session.controller.force(self.buffer)
        if not changed:
            self.hooks.update_status("so-long: already in fallback mode")
        self._refresh()
        return changed

    def _show(self, buffer: Buffer) -> Buffer:
        self.buffer = buffer
        self._refresh()
        return buffer

    def _refresh(self) -> None:
        if self.buffer is None:
            return
        view = self.buffer.snapshot()
        self.hooks.update_view(view)
        self.hooks.update_status(self._status_line(view))

    @staticmethod
    def _status_line(view: BufferView) -> str:
        parts = [view.major_mode or "?", view.phase.value]
        if view.original_mode:
            parts.append(f"was {view.original_mode}")
        if view.read_only:
            parts.append("read-only")
        return " | ".join(parts)

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {}
        if self.buffer is not None:
            snapshot = {
                "buffer": self.buffer.name,
                "mode": self.buffer.major_mode,
            }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix, *(f"{key}={value!r}" for key, value in snapshot.items())]
        self.hooks.log(" ".join(parts))


__all__ = ["SO_LONG_EVENTS", "TextualSoLongAdapter", "TextualUIHooks"]
