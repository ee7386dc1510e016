"""Clock helpers for document timestamps, labels, and export filenames."""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(tz=UTC)


def epoch_millis(moment: datetime) -> int:
    """Return milliseconds since the Unix epoch for a timestamp."""
    return int(moment.timestamp() * 1000)


def display_date(moment: datetime) -> str:
    """Format a date the way issue headers show it, e.g. 'October 19, 2026'."""
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"


def label_timestamp(moment: datetime) -> str:
    """Format a timestamp for generated version labels."""
    return moment.strftime("%Y-%m-%d %H:%M:%S")
