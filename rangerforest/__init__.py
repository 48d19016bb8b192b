"""Random forest building blocks: constants, data storage, helpers and option handling."""

__version__ = "0.12.4"

__all__ = [
    "checks",
    "constants",
    "data",
    "helpers",
    "options",
]