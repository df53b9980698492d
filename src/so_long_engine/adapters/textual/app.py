"""Executable Textual viewer that opens a file through the so-long engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when the viewer is run
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use so_long_engine.adapters.textual.app"
    ) from exc

from so_long_engine.buffer import BufferView
from so_long_engine.session import create_default_session

from .controller import TextualSoLongAdapter, TextualUIHooks

PREVIEW_LINES = 200
PREVIEW_COLUMNS = 400


@dataclass
class UIState:
    preview_text: str = ""
    status_text: str = ""
    last_event: str = ""


class SoLongViewerApp(App[None]):
    """Read-only preview of a file plus the engine's decision for it."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#preview {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#event-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("r", "revert", "Revert mode"),
        ("s", "force", "Force so-long"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        self._state = UIState()
        self.adapter: TextualSoLongAdapter | None = None
        self._preview_widget: Static | None = None
        self._status_widget: Static | None = None
        self._event_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical(id="preview-area"):
            self._preview_widget = Static("", id="preview", markup=False)
            yield self._preview_widget
        self._status_widget = Static("", id="status-line", markup=False)
        self._event_widget = Static("", id="event-line", markup=False)
        yield self._status_widget
        yield self._event_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_view=self._update_view,
            update_status=self._update_status,
            handle_event=self._handle_event,
        )
        self.adapter = TextualSoLongAdapter(create_default_session(), hooks)
        self.adapter.open_file(self.path)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()

    def action_revert(self) -> None:
        if self.adapter:
            self.adapter.revert()

    def action_force(self) -> None:
        if self.adapter:
            self.adapter.force()

    def _update_view(self, view: BufferView) -> None:
        if self.adapter is None or self.adapter.buffer is None:
            return
        lines = self.adapter.buffer.document.snapshot()[:PREVIEW_LINES]
        self._state.preview_text = "\n".join(
            line if len(line) <= PREVIEW_COLUMNS else line[:PREVIEW_COLUMNS] + " …"
            for line in lines
        )
        self.sub_title = view.major_mode or ""
        if self._preview_widget:
            self._preview_widget.update(self._state.preview_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        self._state.last_event = f"{name} {payload}" if payload else name
        if self._event_widget:
            self._event_widget.update(self._state.last_event)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Open a file in the so-long Textual viewer."
    )
    parser.add_argument("path", help="File to open")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    SoLongViewerApp(args.path).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
