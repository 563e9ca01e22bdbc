"""Clock helpers.

``utcnow`` returns **naive** UTC datetimes so values compare cleanly with
SQLAlchemy ``DateTime`` columns on both SQLite and PostgreSQL.
``monotonic`` is the clock used for cache expiry, since wall-clock jumps
must not resurrect or prematurely expire entries.
"""

import time
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def monotonic() -> float:
    return time.monotonic()
