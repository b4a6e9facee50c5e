"""Single source of "now" for the application.

Timestamps are stored as naive UTC so that comparisons behave the same on
SQLite, MySQL and PostgreSQL. Tests monkeypatch ``utcnow`` to move time.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
