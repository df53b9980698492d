"""Host editor collaborators: protocols, middleware pipelines, reference host."""

from .editor import DEFAULT_GLOBAL_MINOR_MODES, EditorHost
from .pipeline import Handler, Middleware, Pipeline
from .protocols import AfterChangeListener, ModeHost

__all__ = [
    "AfterChangeListener",
    "DEFAULT_GLOBAL_MINOR_MODES",
    "EditorHost",
    "Handler",
    "Middleware",
    "ModeHost",
    "Pipeline",
]
