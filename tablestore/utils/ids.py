"""
Identifier and timestamp helpers shared by the repository engine.
"""

from __future__ import annotations

import random
import string
from datetime import UTC, datetime

_BASE36 = string.digits + string.ascii_lowercase


def random_token(length: int = 7) -> str:
    """
    Return a short random base-36 token.

    Not a cryptographic identifier and never checked for collisions against
    existing ids.
    """
    return "".join(random.choices(_BASE36, k=length))


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a `Z` suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["random_token", "utc_timestamp"]
