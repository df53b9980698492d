"""Major/minor mode definitions, registry, and target-mode classification."""

from .base_mode import MinorModeDefinition, ModeBus, ModeDefinition, ModeInit
from .classifier import is_target_mode
from .defaults import DEFAULT_MODE, FALLBACK_MODE, load_default_modes
from .registry import ModeConflictError, ModeRegistry, RegistryStats

__all__ = [
    "DEFAULT_MODE",
    "FALLBACK_MODE",
    "MinorModeDefinition",
    "ModeBus",
    "ModeConflictError",
    "ModeDefinition",
    "ModeInit",
    "ModeRegistry",
    "RegistryStats",
    "is_target_mode",
    "load_default_modes",
]
