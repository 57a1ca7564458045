"""Terminal front-end for the Jujutsu version control system."""

__all__ = [
    "adapters",
    "config",
    "flows",
    "keymaps",
    "runtime",
    "session",
    "vcs",
]

__version__ = "0.1.0"
