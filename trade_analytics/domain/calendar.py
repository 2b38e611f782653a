"""Calendar Bucketing: Map timestamps to week and month keys.

All functions convert the timestamp to UTC first so that bucket
boundaries do not drift with the local timezone.

Bucket keys:
- week_bucket:  (calendar year, ISO week)    e.g. (2024, 1)
- month_bucket: (calendar year, month 0-11)  e.g. (2024, 0)
- month_key:    "YYYY-MM"                    e.g. "2024-01"
- month_label:  "MMYY"                       e.g. "0124"

Known quirk:
    week_bucket pairs the ISO week number with the *calendar* year, not the
    ISO week-year. 2024-12-30 falls in ISO week 1 of 2025, so it is keyed
    (2024, 1) and shares a bucket with the first week of January 2024.
    The tests in test_calendar.py pin this behavior.
"""

from datetime import datetime

from trade_analytics.domain.models import to_utc


def iso_week_number(ts: datetime) -> int:
    """ISO-8601 week number (weeks start Monday, week 1 holds the first Thursday)."""
    return to_utc(ts).isocalendar()[1]


def week_bucket(ts: datetime) -> tuple[int, int]:
    """(calendar year, ISO week number) for a timestamp."""
    utc = to_utc(ts)
    return (utc.year, utc.isocalendar()[1])


def month_bucket(ts: datetime) -> tuple[int, int]:
    """(calendar year, zero-based month) for a timestamp."""
    utc = to_utc(ts)
    return (utc.year, utc.month - 1)


def month_key(ts: datetime) -> str:
    """Sortable "YYYY-MM" key for a timestamp."""
    utc = to_utc(ts)
    return f"{utc.year:04d}-{utc.month:02d}"


def month_label(key: str) -> str:
    """Display label "MMYY" for a "YYYY-MM" key.

    The two-digit year is lossy across centuries.

    Example:
        >>> month_label("2024-03")
        '0324'
    """
    year, month = key.split("-")
    return f"{int(month):02d}{int(year) % 100:02d}"
