"""Chart-ready distributions over already-filtered records.

* **weekday**: 7 buckets, Sunday first, by effective date
* **hourly**:  24 buckets by hour sent; records with no known hour skipped
* **trend**:   dense daily series ending at ``end`` (zero-filled)

Each bucket is a plain dict, ready to hand to a chart or JSON encoder.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from .records import SessionRecord, effective_date, record_duration, record_hour

WEEKDAY_LABELS: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

DEFAULT_TREND_DAYS = 30


def _sunday_index(day: date) -> int:
    return (day.weekday() + 1) % 7


def weekday_histogram(records: Iterable[SessionRecord]) -> list[dict]:
    buckets = [{"label": label, "sessions": 0, "minutes": 0} for label in WEEKDAY_LABELS]
    for record in records:
        day = effective_date(record)
        if day is None:
            continue
        bucket = buckets[_sunday_index(day)]
        bucket["sessions"] += 1
        bucket["minutes"] += record_duration(record)
    return buckets


def hourly_histogram(records: Iterable[SessionRecord]) -> list[dict]:
    buckets = [{"hour": hour, "sessions": 0} for hour in range(24)]
    for record in records:
        hour = record_hour(record)
        if hour is None or not 0 <= hour <= 23:
            continue
        buckets[hour]["sessions"] += 1
    return buckets


def daily_trend(
    records: Iterable[SessionRecord],
    end: date,
    days: int = DEFAULT_TREND_DAYS,
) -> list[dict]:
    """``days`` entries from ``end - (days-1)`` through ``end``, oldest first."""
    start = end - timedelta(days=days - 1)
    series = {
        start + timedelta(days=offset): {"sessions": 0, "minutes": 0}
        for offset in range(max(days, 0))
    }
    for record in records:
        slot = series.get(effective_date(record))
        if slot is None:
            continue
        slot["sessions"] += 1
        slot["minutes"] += record_duration(record)
    return [{"date": day, **totals} for day, totals in series.items()]


def compute_distributions(
    records: Iterable[SessionRecord],
    *,
    end: date | None = None,
    days: int = DEFAULT_TREND_DAYS,
) -> dict[str, list[dict]]:
    """All three distributions.  *end* defaults to today."""
    records = list(records)
    if end is None:
        end = date.today()
    return {
        "weekday": weekday_histogram(records),
        "hourly": hourly_histogram(records),
        "trend": daily_trend(records, end, days),
    }
