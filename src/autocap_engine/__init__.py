"""Incremental capitalization correction engine for structured prose."""

__all__ = [
    "adapters",
    "buffer",
    "correction",
    "runtime",
    "settings",
]

__version__ = "0.1.0"
