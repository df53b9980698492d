"""Long-line detection, override policy, and the override controller."""

from .config import Configuration, ConfigurationError, Settings, default_hooks
from .controller import NoOriginalModeError, OverrideController
from .policy import InhibitionSignal, OverridePolicy
from .scanner import detect_long_line

__all__ = [
    "Configuration",
    "ConfigurationError",
    "InhibitionSignal",
    "NoOriginalModeError",
    "OverrideController",
    "OverridePolicy",
    "Settings",
    "default_hooks",
    "detect_long_line",
]
