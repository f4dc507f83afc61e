"""
Domain package for tablestore.

Exports the bookkeeping models shared by the repository engine, the facade
and the CLI. Keep this package focused on data definitions.
"""

from tablestore.domain.models import SystemRecord

__all__ = [
    "SystemRecord",
]
