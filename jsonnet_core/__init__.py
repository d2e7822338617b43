"""Runtime building blocks of a Jsonnet interpreter: errors, lazy values, contexts, arrays, operators and options."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "pending",
    "context",
    "arrays",
    "array_views",
    "operators",
    "options",
]