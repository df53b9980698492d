"""Convenience wiring of a reference host with an enabled controller."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from so_long_engine.buffer import Buffer
from so_long_engine.engine import OverrideController, Settings
from so_long_engine.host import EditorHost


@dataclass
class Session:
    host: EditorHost
    controller: OverrideController

    def open_text(
        self, name: str, text: str, *, file_name: Optional[str] = None
    ) -> Buffer:
        return self.host.open_buffer(name, text, file_name=file_name)

    def open_file(self, path: str | Path) -> Buffer:
        target = Path(path)
        text = target.read_text(encoding="utf-8", errors="replace")
        return self.open_text(target.name, text, file_name=str(target))


def create_default_session(
    settings: Optional[Settings] = None, *, enable: bool = True
) -> Session:
    """Build an :class:`EditorHost` with default modes and a controller."""

    host = EditorHost()
    controller = OverrideController(host, settings or Settings.from_env())
    if enable:
        controller.enable()
    return Session(host=host, controller=controller)


__all__ = ["Session", "create_default_session"]
