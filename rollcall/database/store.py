"""Database access: rows in, canonical engine types out, plus the writes
that keep students, groups, records and absences up to date.

This is the only place stored values are normalised.  Loose legacy
values (unparseable timestamps and dates, ``"HH:MM:SS"`` times, null or
negative durations, keys with stray whitespace, rows with no student key)
are cleaned up here so the statistics engine only ever sees
:mod:`rollcall.analytics.records` types.  Typed date columns are read as
raw text for the same reason: one bad value must not sink the whole load.

Failures talking to the database surface as :class:`DataFetchError` or
:class:`DataWriteError`; nothing is retried here.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time

from sqlalchemy import String, func, type_coerce
from sqlalchemy.exc import SQLAlchemyError

from ..analytics.records import (
    Absence,
    Group,
    SessionRecord,
    Snapshot,
    Student,
    parse_date,
    parse_datetime,
    parse_time,
)
from ..errors import DataFetchError, DataWriteError, NotFoundError
from .db import get_session
from .models import AbsenceRow, GroupRow, RecordRow, StudentRow

logger = logging.getLogger(__name__)


# ── value cleaning ────────────────────────────────────────────────────────


def _clean_key(value) -> str | None:
    if value is None:
        return None
    key = str(value).strip()
    return key or None


def _clean_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _clean_duration(value) -> int | None:
    minutes = _clean_int(value)
    return minutes if minutes is not None and minutes >= 0 else None


def _loose(column):
    """Select *column* as plain text, skipping the typed result processor."""
    return type_coerce(column, String).label(column.key)


# ── row → domain ──────────────────────────────────────────────────────────


def student_from_row(row) -> Student | None:
    """``None`` for students with no usable key."""
    key = _clean_key(row.student_key)
    if key is None:
        logger.debug("Skipping student %s with no key", row.id)
        return None
    return Student(
        id=row.id,
        student_key=key,
        display_name=(row.display_name or "").strip() or key,
        group_id=_clean_int(row.group_id),
        color=row.color,
    )


def group_from_row(row) -> Group:
    return Group(id=row.id, name=row.name, description=row.description)


def record_from_row(row) -> SessionRecord | None:
    """``None`` for rows that can't be attributed to anyone or placed in time."""
    key = _clean_key(row.student_key)
    if key is None:
        logger.debug("Skipping record %s with no student key", row.id)
        return None
    created = parse_datetime(row.created_at)
    if created is None:
        logger.debug("Skipping record %s with bad created_at %r", row.id, row.created_at)
        return None
    return SessionRecord(
        id=row.id,
        student_key=key,
        created_at=created,
        session_date=parse_date(row.session_date),
        duration_minutes=_clean_duration(row.duration_minutes),
        time_of_day=parse_time(row.time_sent),
        message_type=row.message_type,
    )


def absence_from_row(row) -> Absence | None:
    key = _clean_key(row.student_key)
    day = parse_date(row.absence_date)
    if key is None or day is None:
        logger.debug("Skipping absence %r on %r", row.student_key, row.absence_date)
        return None
    return Absence(student_key=key, absence_date=day)


# ── fetch operations ──────────────────────────────────────────────────────


def _fetch(what: str, query):
    try:
        with get_session() as db:
            return query(db)
    except SQLAlchemyError as exc:
        logger.error("Failed to fetch %s: %s", what, exc)
        raise DataFetchError(f"Could not load {what}") from exc


def fetch_students() -> list[Student]:
    rows = _fetch("students", lambda db: db.query(
        StudentRow.id,
        StudentRow.student_key,
        StudentRow.display_name,
        StudentRow.group_id,
        StudentRow.color,
    ).order_by(StudentRow.id).all())
    return [s for s in (student_from_row(r) for r in rows) if s is not None]


def fetch_groups() -> list[Group]:
    rows = _fetch("groups", lambda db: db.query(GroupRow).order_by(GroupRow.name).all())
    return [group_from_row(r) for r in rows]


def fetch_records() -> list[SessionRecord]:
    """All records, newest first."""
    rows = _fetch("records", lambda db: db.query(
        RecordRow.id,
        _loose(RecordRow.created_at),
        RecordRow.student_key,
        RecordRow.session_date,
        RecordRow.duration_minutes,
        RecordRow.time_sent,
        RecordRow.message_type,
    ).order_by(RecordRow.created_at.desc()).all())
    return [rec for rec in (record_from_row(r) for r in rows) if rec is not None]


def fetch_absences() -> list[Absence]:
    rows = _fetch("absences", lambda db: db.query(
        AbsenceRow.student_key, _loose(AbsenceRow.absence_date),
    ).all())
    return [a for a in (absence_from_row(r) for r in rows) if a is not None]


def load_snapshot() -> Snapshot:
    """Everything the statistics engine needs for one pass."""
    snapshot = Snapshot.of(
        records=fetch_records(),
        students=fetch_students(),
        groups=fetch_groups(),
        absences=fetch_absences(),
    )
    logger.info(
        "Loaded snapshot: %d records, %d students, %d groups, %d absences",
        len(snapshot.records), len(snapshot.students),
        len(snapshot.groups), len(snapshot.absences),
    )
    return snapshot


# ── write operations ──────────────────────────────────────────────────────


def _write(what: str, action):
    try:
        with get_session() as db:
            return action(db)
    except SQLAlchemyError as exc:
        logger.error("Failed to %s: %s", what, exc)
        raise DataWriteError(f"Could not {what}") from exc


def _require_key(value) -> str:
    key = _clean_key(value)
    if key is None:
        raise ValueError("Student key must not be empty")
    return key


def _require_group(db, group_id: int) -> GroupRow:
    group = db.get(GroupRow, group_id)
    if group is None:
        raise NotFoundError(f"No group with id {group_id}")
    return group


def _require_student(db, key: str) -> StudentRow:
    row = (
        db.query(StudentRow)
        .filter(func.trim(StudentRow.student_key) == key)
        .first()
    )
    if row is None:
        raise NotFoundError(f"No student with key {key!r}")
    return row


def _require_record(db, record_id: int) -> RecordRow:
    row = db.get(RecordRow, record_id)
    if row is None:
        raise NotFoundError(f"No record with id {record_id}")
    return row


def _date_text(value) -> str | None:
    if value is None:
        return None
    day = parse_date(value)
    if day is None:
        raise ValueError(f"Invalid date {value!r}")
    return day.isoformat()


def _time_text(value) -> str | None:
    if value is None:
        return None
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Invalid time {value!r}")
    return parsed.isoformat(timespec="seconds")


def _minutes(value) -> int | None:
    if value is None:
        return None
    minutes = _clean_int(value)
    if minutes is None or minutes < 0:
        raise ValueError(f"Invalid duration {value!r}")
    return minutes


def add_student(
    student_key: str,
    display_name: str | None = None,
    group_id: int | None = None,
    color: str | None = None,
) -> Student:
    """Register a student.  Raises :class:`DataWriteError` on a duplicate key."""
    key = _require_key(student_key)

    def action(db):
        if group_id is not None:
            _require_group(db, group_id)
        row = StudentRow(
            student_key=key,
            display_name=(display_name or "").strip() or None,
            group_id=group_id,
            color=color,
        )
        db.add(row)
        db.flush()
        return student_from_row(row)

    student = _write(f"add student {key!r}", action)
    logger.info("Added student %s", key)
    return student


def add_group(name: str, description: str | None = None) -> Group:
    name = (name or "").strip()
    if not name:
        raise ValueError("Group name must not be empty")

    def action(db):
        row = GroupRow(name=name, description=description)
        db.add(row)
        db.flush()
        return group_from_row(row)

    return _write(f"add group {name!r}", action)


def rename_group(group_id: int, name: str, description: str | None = None) -> Group:
    """Change a group's name, and its description when one is given."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Group name must not be empty")

    def action(db):
        row = _require_group(db, group_id)
        row.name = name
        if description is not None:
            row.description = description
        return group_from_row(row)

    return _write(f"rename group {group_id}", action)


def delete_group(group_id: int) -> int:
    """Delete a group and unassign its members.  Returns how many were unassigned."""

    def action(db):
        row = _require_group(db, group_id)
        released = (
            db.query(StudentRow)
            .filter(StudentRow.group_id == group_id)
            .update({StudentRow.group_id: None}, synchronize_session=False)
        )
        db.delete(row)
        return released

    released = _write(f"delete group {group_id}", action)
    logger.info("Deleted group %s, unassigned %d students", group_id, released)
    return released


def assign_group(student_key: str, group_id: int | None) -> Student:
    """Move a student into a group, or out of any group with ``None``."""
    key = _require_key(student_key)

    def action(db):
        if group_id is not None:
            _require_group(db, group_id)
        row = _require_student(db, key)
        row.group_id = group_id
        return student_from_row(row)

    return _write(f"assign {key!r} to group {group_id}", action)


def add_record(
    student_key: str,
    session_date: date | str | None = None,
    duration_minutes: int | None = None,
    time_sent: time | str | None = None,
    *,
    created_at: datetime | None = None,
    message_type: str | None = None,
    message_text: str | None = None,
) -> SessionRecord:
    """Store one session report.  The key need not belong to a known student."""
    key = _require_key(student_key)
    values = dict(
        created_at=created_at or datetime.now(),
        student_key=key,
        session_date=_date_text(session_date),
        duration_minutes=_minutes(duration_minutes),
        time_sent=_time_text(time_sent),
        message_type=message_type,
        message_text=message_text,
    )

    def action(db):
        row = RecordRow(**values)
        db.add(row)
        db.flush()
        return record_from_row(row)

    return _write(f"add record for {key!r}", action)


def update_record(
    record_id: int,
    session_date: date | str | None = None,
    duration_minutes: int | None = None,
) -> SessionRecord | None:
    """Correct a record's session date and/or duration.  ``None`` leaves a field as is."""
    date_text = _date_text(session_date)
    minutes = _minutes(duration_minutes)

    def action(db):
        row = _require_record(db, record_id)
        if date_text is not None:
            row.session_date = date_text
        if minutes is not None:
            row.duration_minutes = minutes
        return record_from_row(row)

    return _write(f"update record {record_id}", action)


def delete_record(record_id: int) -> None:
    def action(db):
        db.delete(_require_record(db, record_id))

    _write(f"delete record {record_id}", action)


def add_absence(
    student_key: str, absence_date: date | str, reason: str | None = None,
) -> Absence:
    """Excuse a student for one date.  A second absence on the same date is a
    :class:`DataWriteError`."""
    key = _require_key(student_key)
    day = parse_date(absence_date)
    if day is None:
        raise ValueError(f"Invalid date {absence_date!r}")

    def action(db):
        db.add(AbsenceRow(student_key=key, absence_date=day, reason=reason))
        db.flush()
        return Absence(student_key=key, absence_date=day)

    return _write(f"add absence for {key!r} on {day}", action)
