"""Canonical input types for the statistics engine, plus the record filter.

Every aggregation pass works on a :class:`Snapshot`, an immutable bundle of
records, students, groups and absences read fresh from the store.  Nothing in
here mutates its inputs or keeps state between calls.

Date & time fallbacks
---------------------
* **effective date**: ``session_date`` when present, else the calendar date
  of ``created_at``.
* **hour**: hour of ``time_of_day`` when present, else hour of
  ``created_at``.

Malformed values never raise: a record with no usable date simply drops out
of date-based views, a bad duration counts as zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable

from .periods import Interval

logger = logging.getLogger(__name__)


# ── entities ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionRecord:
    """One session report filed by a student."""

    id: int
    student_key: str
    created_at: datetime
    session_date: date | None = None
    duration_minutes: int | None = None
    time_of_day: time | None = None
    message_type: str | None = None


@dataclass(frozen=True)
class Student:
    id: int
    student_key: str
    display_name: str
    group_id: int | None = None
    color: str | None = None     # display only


@dataclass(frozen=True)
class Group:
    id: int
    name: str
    description: str | None = None


@dataclass(frozen=True)
class Absence:
    """An excused non-report for one calendar date."""

    student_key: str
    absence_date: date


@dataclass(frozen=True)
class Snapshot:
    """Frozen view of the store for one aggregation pass."""

    records: tuple[SessionRecord, ...] = ()
    students: tuple[Student, ...] = ()
    groups: tuple[Group, ...] = ()
    absences: tuple[Absence, ...] = ()

    @classmethod
    def of(
        cls,
        records: Iterable[SessionRecord] = (),
        students: Iterable[Student] = (),
        groups: Iterable[Group] = (),
        absences: Iterable[Absence] = (),
    ) -> "Snapshot":
        return cls(tuple(records), tuple(students), tuple(groups), tuple(absences))


@dataclass(frozen=True)
class StatsFilter:
    """Group or single-student selector.  ``student_key`` wins over ``group_id``."""

    group_id: int | None = None
    student_key: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.group_id is None and self.student_key is None


NO_FILTER = StatsFilter()


# ── field fallbacks ───────────────────────────────────────────────────────


def _as_date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def effective_date(record: SessionRecord) -> date | None:
    """Session date, else the created date, else ``None``."""
    return _as_date(record.session_date) or _as_date(record.created_at)


def record_hour(record: SessionRecord) -> int | None:
    """Hour of day the report was sent, or ``None`` when unknown."""
    tod = record.time_of_day
    if isinstance(tod, (time, datetime)):
        return tod.hour
    if isinstance(record.created_at, datetime):
        return record.created_at.hour
    return None


def record_duration(record: SessionRecord) -> int:
    """Duration in whole minutes; missing, negative or junk values are 0."""
    value = record.duration_minutes
    if value is None or isinstance(value, bool):
        return 0
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring bad duration %r on record %s", value, record.id)
        return 0
    return minutes if minutes > 0 else 0


def sort_key(record: SessionRecord) -> tuple:
    """Chronological order; ``created_at`` breaks ties on the same date."""
    created = record.created_at if isinstance(record.created_at, datetime) else datetime.min
    return (effective_date(record) or date.min, created)


# ── boundary parsers ──────────────────────────────────────────────────────


def parse_date(value: object) -> date | None:
    """``date`` / ``datetime`` / ISO string → ``date``; anything else → None."""
    if value is None:
        return None
    as_date = _as_date(value)
    if as_date is not None:
        return as_date
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug("Unparseable date %r", value)
        return None


def parse_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if value is None:
        return None
    text = str(value).strip().replace("Z", "+00:00")
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


def parse_time(value: object) -> time | None:
    """Accepts ``time``, ``datetime``, ``"HH:MM[:SS]"`` or a full ISO timestamp."""
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if "T" in text or "-" in text[:5]:
        parsed = parse_datetime(text)
        return parsed.time() if parsed else None
    parts = text.split(":")
    try:
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) > 1 else 0
        second = int(float(parts[2])) if len(parts) > 2 else 0
        return time(hour, minute, second)
    except (ValueError, IndexError):
        logger.debug("Unparseable time of day %r", value)
        return None


# ── record filter ─────────────────────────────────────────────────────────


def student_index(students: Iterable[Student]) -> dict[str, Student]:
    """``student_key → Student`` lookup, built once per pass."""
    return {s.student_key: s for s in students}


def students_in_scope(
    students: Iterable[Student], stats_filter: StatsFilter | None = None,
) -> list[Student]:
    f = stats_filter or NO_FILTER
    if f.student_key is not None:
        return [s for s in students if s.student_key == f.student_key]
    if f.group_id is not None:
        return [s for s in students if s.group_id == f.group_id]
    return list(students)


def _owner_matches(
    record: SessionRecord, index: dict[str, Student], f: StatsFilter,
) -> bool:
    if f.student_key is not None:
        return record.student_key == f.student_key
    if f.group_id is not None:
        owner = index.get(record.student_key)
        return owner is not None and owner.group_id == f.group_id
    return True


def filter_records(
    records: Iterable[SessionRecord],
    interval: Interval,
    students: Iterable[Student],
    stats_filter: StatsFilter | None = None,
) -> list[SessionRecord]:
    """Records dated inside *interval* whose owner matches *stats_filter*.

    With an empty filter, records from keys with no matching student are
    kept so distributions still see them.
    """
    f = stats_filter or NO_FILTER
    index = student_index(students)
    selected: list[SessionRecord] = []
    for record in records:
        day = effective_date(record)
        if day is None or not interval.contains(day):
            continue
        if _owner_matches(record, index, f):
            selected.append(record)
    return selected


def records_by_student(records: Iterable[SessionRecord]) -> dict[str, list[SessionRecord]]:
    grouped: dict[str, list[SessionRecord]] = {}
    for record in records:
        grouped.setdefault(record.student_key, []).append(record)
    return grouped


__all__ = [
    "SessionRecord", "Student", "Group", "Absence", "Snapshot",
    "StatsFilter", "NO_FILTER",
    "effective_date", "record_hour", "record_duration", "sort_key",
    "parse_date", "parse_datetime", "parse_time",
    "student_index", "students_in_scope", "filter_records", "records_by_student",
]
