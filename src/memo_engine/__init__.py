"""Selection-aware markdown editing engine."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "editor",
    "keymaps",
    "runtime",
    "services",
]

__version__ = "0.1.0"
