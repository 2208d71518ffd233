"""
Time helpers shared by adapters and repositories.

Responsibility: Produce naive UTC timestamps for database columns
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Current UTC time as a naive datetime.

    Columns are declared without timezone, so values are stored and
    compared as naive UTC on both PostgreSQL and SQLite.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def utc_today() -> date:
    """Current UTC calendar date"""
    return utc_now().date()
