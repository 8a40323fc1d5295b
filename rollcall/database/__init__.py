"""Database package."""

from .db import get_session, init_db, configure_engine
from .models import GroupRow, StudentRow, RecordRow, AbsenceRow
from .store import (
    fetch_students,
    fetch_groups,
    fetch_records,
    fetch_absences,
    load_snapshot,
    add_student,
    add_group,
    rename_group,
    delete_group,
    assign_group,
    add_record,
    update_record,
    delete_record,
    add_absence,
)

__all__ = [
    "get_session", "init_db", "configure_engine",
    "GroupRow", "StudentRow", "RecordRow", "AbsenceRow",
    "fetch_students", "fetch_groups", "fetch_records", "fetch_absences",
    "load_snapshot",
    "add_student", "add_group", "rename_group", "delete_group", "assign_group",
    "add_record", "update_record", "delete_record", "add_absence",
]
