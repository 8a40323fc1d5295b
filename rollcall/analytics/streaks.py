"""Consecutive-day streaks over a student's full history.

A streak is a run of consecutive calendar days, by effective date, with at
least one record.  Several records on one day count once.  The schedule is
ignored: a weekend with no report breaks a streak like any other gap.
Absences are not records, so they never extend a streak either.

``current`` is the final run's length while it is still alive, i.e. the
last active day is today or yesterday; otherwise it is 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .records import SessionRecord, effective_date


@dataclass(frozen=True)
class Streaks:
    current: int = 0
    longest: int = 0
    last_active: date | None = None


def active_dates(records: Iterable[SessionRecord]) -> list[date]:
    """Distinct effective dates, ascending.  Undated records are skipped."""
    return sorted({d for d in (effective_date(r) for r in records) if d is not None})


def streaks_from_dates(dates: list[date], today: date) -> Streaks:
    """Walk sorted distinct *dates* and measure the runs."""
    if not dates:
        return Streaks()

    longest = run = 1
    for prev, day in zip(dates, dates[1:]):
        if (day - prev).days == 1:
            run += 1
        else:
            run = 1
        if run > longest:
            longest = run

    last = dates[-1]
    alive = 0 <= (today - last).days <= 1
    return Streaks(current=run if alive else 0, longest=longest, last_active=last)


def compute_streaks(
    records: Iterable[SessionRecord], *, today: date | None = None,
) -> Streaks:
    """Current and longest streak for one student's records."""
    if today is None:
        today = date.today()
    return streaks_from_dates(active_dates(records), today)
