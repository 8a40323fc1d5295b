"""Weekly session schedule and the expected-session count per period.

Expected sessions
-----------------
    day     1 if *today* is a required weekday, else 0
    week    number of required weekdays
    month   required weekdays x 4   (flat, not calendar-accurate)
    year    required weekdays x 52
    all     0 (no fixed denominator)

``day`` looks at today's weekday, not the selected date's.  Pass the
selected date as ``today`` to get the per-date count instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from .periods import Interval, PeriodType


WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

DEFAULT_REQUIRED_DAYS: tuple[str, ...] = ("Monday", "Tuesday", "Thursday", "Friday")

WEEKS_PER_MONTH = 4
WEEKS_PER_YEAR = 52


def weekday_number(value: int | str) -> int:
    """``"Monday"`` / ``"mon"`` / ``0`` → ``0`` (Python ``date.weekday()``)."""
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"Weekday number out of range: {value}")
    text = str(value).strip().lower()
    for index, name in enumerate(WEEKDAY_NAMES):
        if len(text) >= 3 and name.lower().startswith(text):
            return index
    raise ValueError(f"Unknown weekday {value!r}")


@dataclass(frozen=True)
class Schedule:
    """The set of weekdays on which a session is required."""

    required_weekdays: frozenset[int] = frozenset(
        weekday_number(d) for d in DEFAULT_REQUIRED_DAYS
    )

    @classmethod
    def from_names(cls, days: Iterable[int | str]) -> "Schedule":
        return cls(frozenset(weekday_number(d) for d in days))

    # ── queries ─────────────────────────────────────────────────────

    @property
    def weekdays(self) -> list[int]:
        """Required weekdays, Monday first."""
        return sorted(self.required_weekdays)

    @property
    def day_names(self) -> list[str]:
        return [WEEKDAY_NAMES[d] for d in self.weekdays]

    @property
    def days_per_week(self) -> int:
        return len(self.required_weekdays)

    def is_required(self, day: date) -> bool:
        return day.weekday() in self.required_weekdays

    def required_dates(self, interval: Interval) -> list[date]:
        return [d for d in interval.days() if self.is_required(d)]

    def expected_sessions(
        self, period: PeriodType | str, *, today: date | None = None,
    ) -> int:
        period = PeriodType.parse(period)
        if today is None:
            today = date.today()
        return _EXPECTED[period](self, today)


_EXPECTED: dict[PeriodType, Callable[[Schedule, date], int]] = {
    PeriodType.DAY: lambda s, today: 1 if s.is_required(today) else 0,
    PeriodType.WEEK: lambda s, today: s.days_per_week,
    PeriodType.MONTH: lambda s, today: s.days_per_week * WEEKS_PER_MONTH,
    PeriodType.YEAR: lambda s, today: s.days_per_week * WEEKS_PER_YEAR,
    PeriodType.ALL: lambda s, today: 0,
}


DEFAULT_SCHEDULE = Schedule()
