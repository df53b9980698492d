"""Fallback-mode decision engine for buffers with very long lines."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "engine",
    "host",
    "localvars",
    "modes",
    "runtime",
]

__version__ = "0.1.0"
