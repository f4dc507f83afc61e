"""
Utilities package for tablestore.

Exports shared helpers for logging, identifiers and timestamps. Keep this
package lightweight and free of schema or storage logic.
"""

from tablestore.utils.ids import random_token, utc_timestamp
from tablestore.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "random_token",
    "utc_timestamp",
]
