"""Mode registry holding major-mode ancestry and known minor modes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from so_long_engine.runtime.telemetry import span

from .base_mode import MinorModeDefinition, ModeDefinition


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    mode_count: int
    minor_mode_count: int
    roots: tuple[str, ...]


class ModeConflictError(RuntimeError):
    """Raised when a mode is registered twice without ``replace``."""

    def __init__(self, mode: str) -> None:
        super().__init__(f"Mode '{mode}' already registered")
        self.mode = mode


class ModeRegistry:
    """Owns major/minor mode definitions and answers ancestry queries."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._modes: Dict[str, ModeDefinition] = {}
        self._minor_modes: Dict[str, MinorModeDefinition] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def register_mode(
        self, definition: ModeDefinition, *, replace: bool = False
    ) -> ModeDefinition:
        with span(
            "modes::register_mode",
            logger_name=self._logger_name,
            component="modes",
            metadata={"mode": definition.name, "parent": definition.parent},
        ) as handle:
            if not replace and definition.name in self._modes:
                raise ModeConflictError(definition.name)
            if definition.parent is not None and definition.parent not in self._modes:
                handle.add_metadata("missing_parent", definition.parent)
                raise KeyError(
                    f"Mode '{definition.name}' derives from unknown mode '{definition.parent}'"
                )
            self._modes[definition.name] = definition
            self._revision += 1
            return definition

    def register_minor_mode(
        self, definition: MinorModeDefinition, *, replace: bool = False
    ) -> MinorModeDefinition:
        if not replace and definition.name in self._minor_modes:
            raise ModeConflictError(definition.name)
        self._minor_modes[definition.name] = definition
        self._revision += 1
        return definition

    def get_mode(self, name: str) -> ModeDefinition:
        try:
            return self._modes[name]
        except KeyError as exc:
            raise KeyError(f"Mode '{name}' is not registered") from exc

    def has_mode(self, name: str) -> bool:
        return name in self._modes

    def has_minor_mode(self, name: str) -> bool:
        return name in self._minor_modes

    def parent_of(self, name: str) -> Optional[str]:
        definition = self._modes.get(name)
        return definition.parent if definition else None

    def ancestors(self, name: str) -> Iterator[str]:
        """Yield ``name``'s parents, nearest first."""

        seen = {name}
        parent = self.parent_of(name)
        while parent is not None and parent not in seen:
            yield parent
            seen.add(parent)
            parent = self.parent_of(parent)

    def derived_from(self, name: str, *candidates: str) -> Optional[str]:
        """Return the first of ``name`` and its ancestors found in ``candidates``."""

        wanted = set(candidates)
        if name in wanted:
            return name
        for ancestor in self.ancestors(name):
            if ancestor in wanted:
                return ancestor
        return None

    def stats(self) -> RegistryStats:
        return RegistryStats(
            mode_count=len(self._modes),
            minor_mode_count=len(self._minor_modes),
            roots=tuple(
                sorted(name for name, mode in self._modes.items() if mode.parent is None)
            ),
        )


__all__ = ["ModeConflictError", "ModeRegistry", "RegistryStats"]
