"""Shared test helpers for RollCall."""

import itertools
from datetime import date, datetime, time, timedelta

from rollcall.analytics.records import Absence, Group, SessionRecord, Student

_ids = itertools.count(1)


def rec(key: str, day: date, minutes: int | None = 30, hour: int | None = None,
        **overrides) -> SessionRecord:
    """A record for *key* dated *day*.  ``hour`` sets ``time_of_day``;
    ``created_at`` is noon of the same day unless overridden."""
    fields = dict(
        id=next(_ids),
        student_key=key,
        created_at=datetime.combine(day, time(12, 0)),
        session_date=day,
        duration_minutes=minutes,
        time_of_day=time(hour, 0) if hour is not None else None,
    )
    fields.update(overrides)
    return SessionRecord(**fields)


def run(key: str, start: date, days: int, **kwargs) -> list[SessionRecord]:
    """One record per day for *days* consecutive days."""
    return [rec(key, start + timedelta(days=i), **kwargs) for i in range(days)]


def student(key: str, group_id: int | None = None, sid: int | None = None) -> Student:
    return Student(
        id=sid if sid is not None else next(_ids),
        student_key=key,
        display_name=key.title(),
        group_id=group_id,
    )


def group(gid: int, name: str) -> Group:
    return Group(id=gid, name=name)


def absence(key: str, day: date) -> Absence:
    return Absence(student_key=key, absence_date=day)
