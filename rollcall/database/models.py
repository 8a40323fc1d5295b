"""SQLAlchemy ORM models for RollCall."""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class GroupRow(Base):
    """A cohort of students."""

    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    description = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<GroupRow id={self.id} name={self.name!r}>"


class StudentRow(Base):
    """A student, identified externally by ``student_key`` (a messaging handle)."""

    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_key = Column(String(64), nullable=False, unique=True)
    display_name = Column(String(120), nullable=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=True)
    color = Column(String(16), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<StudentRow id={self.id} key={self.student_key} "
            f"group={self.group_id}>"
        )


class RecordRow(Base):
    """One session report as received.  Values are stored loosely and
    normalised when read by :mod:`rollcall.database.store`."""

    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    student_key = Column(String(64), nullable=True, index=True)
    session_date = Column(String(32), nullable=True)    # "YYYY-MM-DD"
    duration_minutes = Column(Integer, nullable=True)
    time_sent = Column(String(32), nullable=True)       # "HH:MM:SS" or ISO
    message_type = Column(String(32), nullable=True)    # text | voice | image ...
    message_text = Column(String(4000), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<RecordRow id={self.id} key={self.student_key} "
            f"date={self.session_date} minutes={self.duration_minutes}>"
        )


class AbsenceRow(Base):
    """An excused non-report for one student on one date."""

    __tablename__ = "absences"
    __table_args__ = (UniqueConstraint("student_key", "absence_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_key = Column(String(64), nullable=False)
    absence_date = Column(Date, nullable=False)
    reason = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<AbsenceRow key={self.student_key} date={self.absence_date}>"
