from sqlalchemy import Column, DateTime

from snapserve.utils import clock


def utc_now():
    # Resolved at call time so tests can move the clock
    return clock.utcnow()


class TimestampMixin:
    """created_at on insert, updated_at assigned once per flush."""

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
