"""Period selectors and their calendar intervals.

Periods
-------
    day     the reference date itself
    week    Monday..Sunday week containing the reference date
    month   first..last day of the reference month
    year    Jan 1..Dec 31 of the reference year
    all     system start date..today (ignores the reference date)

Intervals are inclusive on both ends.  Navigation (previous / next /
current) shifts the reference date by one unit of the active period and
re-resolves.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterator


# ── constants ─────────────────────────────────────────────────────────────

SYSTEM_START_DATE = date(2024, 1, 1)


class PeriodType(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @classmethod
    def parse(cls, value: "PeriodType | str") -> "PeriodType":
        """Accept an enum member or its name/value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown period {value!r} (expected one of: {valid})") from None

    @property
    def is_bounded(self) -> bool:
        return self is not PeriodType.ALL


@dataclass(frozen=True)
class Interval:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    def __len__(self) -> int:
        return max(0, (self.end - self.start).days + 1)


# ── resolvers (one per period type) ───────────────────────────────────────


def _day(ref: date, today: date, system_start: date) -> Interval:
    return Interval(ref, ref)


def _week(ref: date, today: date, system_start: date) -> Interval:
    monday = ref - timedelta(days=ref.weekday())
    return Interval(monday, monday + timedelta(days=6))


def _month(ref: date, today: date, system_start: date) -> Interval:
    last = calendar.monthrange(ref.year, ref.month)[1]
    return Interval(ref.replace(day=1), ref.replace(day=last))


def _year(ref: date, today: date, system_start: date) -> Interval:
    return Interval(date(ref.year, 1, 1), date(ref.year, 12, 31))


def _all(ref: date, today: date, system_start: date) -> Interval:
    return Interval(system_start, today)


RESOLVERS: dict[PeriodType, Callable[[date, date, date], Interval]] = {
    PeriodType.DAY: _day,
    PeriodType.WEEK: _week,
    PeriodType.MONTH: _month,
    PeriodType.YEAR: _year,
    PeriodType.ALL: _all,
}


def resolve_period(
    period: PeriodType | str,
    reference: date | None = None,
    *,
    today: date | None = None,
    system_start: date | None = None,
) -> Interval:
    """Return the inclusive ``[start, end]`` interval for *period*."""
    period = PeriodType.parse(period)
    if today is None:
        today = date.today()
    if reference is None:
        reference = today
    if system_start is None:
        system_start = SYSTEM_START_DATE
    return RESOLVERS[period](reference, today, system_start)


# ── navigation ────────────────────────────────────────────────────────────


def _add_months(ref: date, months: int) -> date:
    index = ref.year * 12 + (ref.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(ref.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def shift_reference(period: PeriodType | str, reference: date, step: int) -> date:
    """Move *reference* by *step* units of *period* (negative = back)."""
    period = PeriodType.parse(period)
    if period is PeriodType.DAY:
        return reference + timedelta(days=step)
    if period is PeriodType.WEEK:
        return reference + timedelta(weeks=step)
    if period is PeriodType.MONTH:
        return _add_months(reference, step)
    if period is PeriodType.YEAR:
        return _add_months(reference, 12 * step)
    return reference  # "all" has nowhere to go


def navigate(
    period: PeriodType | str,
    reference: date,
    direction: str,
    *,
    today: date | None = None,
) -> date:
    """``direction`` is ``"previous"``, ``"next"`` or ``"current"``."""
    if direction == "current":
        return today if today is not None else date.today()
    if direction == "previous":
        return shift_reference(period, reference, -1)
    if direction == "next":
        return shift_reference(period, reference, 1)
    raise ValueError(f"Unknown direction {direction!r}")


def period_label(period: PeriodType | str, interval: Interval) -> str:
    """Short heading for an interval, e.g. ``"Week of 2024-05-06"``."""
    period = PeriodType.parse(period)
    if period is PeriodType.DAY:
        return interval.start.strftime("%A %Y-%m-%d")
    if period is PeriodType.WEEK:
        return f"Week of {interval.start.isoformat()}"
    if period is PeriodType.MONTH:
        return interval.start.strftime("%B %Y")
    if period is PeriodType.YEAR:
        return str(interval.start.year)
    return f"All time (since {interval.start.isoformat()})"
