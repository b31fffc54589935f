"""
Utilities package for the row-lock interception demo.

Exports shared logging helpers. Keep this package lightweight and free of
domain-specific logic.
"""

from rowlock.utils.logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "JsonFormatter",
    "configure_logging",
    "get_logger",
]
