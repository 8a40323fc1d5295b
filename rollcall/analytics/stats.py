"""Per-student statistics, group rollups and dashboard summaries.

Pipeline
--------
1. resolve the period into an interval
2. filter records to the interval and the group / student selector
3. aggregate per student (zero-record students included)
4. attach streaks and badges computed from the student's *full* history
5. roll students up into groups

Per-student numbers
-------------------
- ``total_duration``   sum of minutes in the window
- ``session_count``    records in the window (same-day duplicates count)
- ``missed_sessions``  max(0, expected - sessions - excused), bounded periods only
- ``completion_rate``  round(sessions / expected * 100), or 100 if nothing expected
- ``avg_duration``     round(total / sessions), or 0

An absence excuses a required day in the window on which the student filed
nothing.  It lowers ``missed_sessions`` only; completion and streaks are
untouched.

Every function here is pure: same snapshot and parameters in, equal
results out.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, Sequence

from .badges import BadgeDef, derive_badges
from .periods import Interval, PeriodType, resolve_period
from .records import (
    Absence,
    Group,
    SessionRecord,
    Snapshot,
    StatsFilter,
    Student,
    effective_date,
    filter_records,
    record_duration,
    records_by_student,
    sort_key,
    students_in_scope,
)
from .schedule import DEFAULT_SCHEDULE, Schedule
from .streaks import compute_streaks

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """``2.5 → 3`` (``round()`` would give 2)."""
    return int(math.floor(value + 0.5))


def completion_rate(session_count: int, expected: int) -> int:
    if expected <= 0:
        return 100
    return round_half_up(session_count / expected * 100)


def average(total: int, count: int) -> int:
    return round_half_up(total / count) if count > 0 else 0


# ── result types ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StudentStats:
    student_id: int
    student_key: str
    display_name: str
    group_id: int | None
    group_name: str | None
    total_duration: int = 0
    session_count: int = 0
    expected_sessions: int = 0
    excused_absences: int = 0
    missed_sessions: int = 0
    completion_rate: int = 100
    avg_duration: int = 0
    current_streak: int = 0
    max_streak: int = 0
    badges: tuple[BadgeDef, ...] = ()

    @property
    def badge_names(self) -> list[str]:
        return [b.name for b in self.badges]


@dataclass(frozen=True)
class GroupStats:
    group_id: int
    name: str
    student_count: int = 0
    total_duration: int = 0
    session_count: int = 0
    avg_duration: int = 0
    missed_sessions: int = 0
    avg_completion_rate: int = 0


@dataclass(frozen=True)
class Summary:
    student_count: int = 0
    total_duration: int = 0
    total_sessions: int = 0
    total_missed: int = 0
    avg_completion_rate: int = 0


@dataclass(frozen=True)
class WeeklyCheckIn:
    """Which required days of one week a student covered."""

    student_key: str
    display_name: str
    submitted: tuple[date, ...] = ()
    excused: tuple[date, ...] = ()
    missing: tuple[date, ...] = ()
    week_duration: int = 0

    @property
    def missing_days(self) -> list[str]:
        return [d.strftime("%A") for d in self.missing]


@dataclass(frozen=True)
class DailyActivity:
    student_key: str
    display_name: str
    has_record: bool = False
    record_count: int = 0
    time_of_day: time | None = None
    duration_minutes: int = 0


# ── helpers ───────────────────────────────────────────────────────────────


def _absence_dates(
    absences: Iterable[Absence], interval: Interval,
) -> dict[str, set[date]]:
    out: dict[str, set[date]] = {}
    for absence in absences:
        day = absence.absence_date
        if isinstance(day, date) and interval.contains(day):
            out.setdefault(absence.student_key, set()).add(day)
    return out


def _excused_count(
    absent: set[date], records: Sequence[SessionRecord], schedule: Schedule,
) -> int:
    filed = {effective_date(r) for r in records}
    return sum(1 for d in absent if schedule.is_required(d) and d not in filed)


# ── per-student aggregation ───────────────────────────────────────────────


def aggregate_student(
    student: Student,
    window: Sequence[SessionRecord],
    history: Sequence[SessionRecord],
    *,
    period: PeriodType,
    expected: int,
    excused: int = 0,
    group_name: str | None = None,
    today: date,
) -> StudentStats:
    """Stats for one student from their windowed and full-history records."""
    total = sum(record_duration(r) for r in window)
    count = len(window)
    missed = max(0, expected - count - excused) if period.is_bounded else 0
    rate = completion_rate(count, expected)
    streaks = compute_streaks(history, today=today)
    badges = derive_badges(history, rate, streaks.longest)

    return StudentStats(
        student_id=student.id,
        student_key=student.student_key,
        display_name=student.display_name,
        group_id=student.group_id,
        group_name=group_name,
        total_duration=total,
        session_count=count,
        expected_sessions=expected,
        excused_absences=excused,
        missed_sessions=missed,
        completion_rate=rate,
        avg_duration=average(total, count),
        current_streak=streaks.current,
        max_streak=streaks.longest,
        badges=tuple(badges),
    )


def compute_student_stats(
    snapshot: Snapshot,
    period: PeriodType | str = PeriodType.WEEK,
    reference: date | None = None,
    stats_filter: StatsFilter | None = None,
    *,
    schedule: Schedule | None = None,
    today: date | None = None,
    system_start: date | None = None,
) -> list[StudentStats]:
    """One :class:`StudentStats` per in-scope student, in snapshot order."""
    period = PeriodType.parse(period)
    if today is None:
        today = date.today()
    if schedule is None:
        schedule = DEFAULT_SCHEDULE

    interval = resolve_period(period, reference, today=today, system_start=system_start)
    expected = schedule.expected_sessions(period, today=today)

    window = records_by_student(
        filter_records(snapshot.records, interval, snapshot.students, stats_filter)
    )
    history = records_by_student(snapshot.records)
    absent = _absence_dates(snapshot.absences, interval)
    group_names = {g.id: g.name for g in snapshot.groups}

    results: list[StudentStats] = []
    for student in students_in_scope(snapshot.students, stats_filter):
        key = student.student_key
        mine = window.get(key, [])
        results.append(aggregate_student(
            student,
            mine,
            history.get(key, []),
            period=period,
            expected=expected,
            excused=_excused_count(absent.get(key, set()), mine, schedule),
            group_name=group_names.get(student.group_id),
            today=today,
        ))

    logger.debug(
        "Computed %d student stats for %s %s..%s",
        len(results), period.value, interval.start, interval.end,
    )
    return results


def windowed_records(
    snapshot: Snapshot,
    period: PeriodType | str = PeriodType.WEEK,
    reference: date | None = None,
    stats_filter: StatsFilter | None = None,
    *,
    today: date | None = None,
    system_start: date | None = None,
) -> tuple[Interval, list[SessionRecord]]:
    """The resolved interval and the records that fall in it."""
    interval = resolve_period(period, reference, today=today, system_start=system_start)
    return interval, filter_records(
        snapshot.records, interval, snapshot.students, stats_filter,
    )


# ── group rollup ──────────────────────────────────────────────────────────


def rollup_groups(
    student_stats: Iterable[StudentStats], groups: Iterable[Group],
) -> list[GroupStats]:
    """Sum member stats into one :class:`GroupStats` per group.

    Membership is the student's *current* ``group_id``; groups with no
    members come back zero-valued.
    """
    members: dict[int, list[StudentStats]] = {}
    for s in student_stats:
        if s.group_id is not None:
            members.setdefault(s.group_id, []).append(s)

    rollups: list[GroupStats] = []
    for group in groups:
        mine = members.get(group.id, [])
        total = sum(s.total_duration for s in mine)
        sessions = sum(s.session_count for s in mine)
        rollups.append(GroupStats(
            group_id=group.id,
            name=group.name,
            student_count=len(mine),
            total_duration=total,
            session_count=sessions,
            avg_duration=average(total, sessions),
            missed_sessions=sum(s.missed_sessions for s in mine),
            avg_completion_rate=(
                average(sum(s.completion_rate for s in mine), len(mine))
            ),
        ))
    return rollups


def compute_group_stats(
    snapshot: Snapshot,
    period: PeriodType | str = PeriodType.WEEK,
    reference: date | None = None,
    stats_filter: StatsFilter | None = None,
    *,
    schedule: Schedule | None = None,
    today: date | None = None,
    system_start: date | None = None,
) -> list[GroupStats]:
    """Group rollups.  A ``group_id`` filter narrows to that group; a
    ``student_key`` filter is ignored since groups are rolled up whole."""
    group_id = stats_filter.group_id if stats_filter else None
    groups = [g for g in snapshot.groups if group_id is None or g.id == group_id]
    stats = compute_student_stats(
        snapshot, period, reference, StatsFilter(group_id=group_id),
        schedule=schedule, today=today, system_start=system_start,
    )
    return rollup_groups(stats, groups)


# ── dashboard summaries ───────────────────────────────────────────────────


def summarize(student_stats: Sequence[StudentStats]) -> Summary:
    if not student_stats:
        return Summary()
    return Summary(
        student_count=len(student_stats),
        total_duration=sum(s.total_duration for s in student_stats),
        total_sessions=sum(s.session_count for s in student_stats),
        total_missed=sum(s.missed_sessions for s in student_stats),
        avg_completion_rate=average(
            sum(s.completion_rate for s in student_stats), len(student_stats),
        ),
    )


def leaderboard(
    student_stats: Iterable[StudentStats], limit: int | None = 5,
) -> list[StudentStats]:
    """Students by total duration, highest first (stable on ties)."""
    ranked = sorted(student_stats, key=lambda s: s.total_duration, reverse=True)
    return ranked if limit is None else ranked[:limit]


def most_missed(
    student_stats: Iterable[StudentStats], limit: int | None = 5,
) -> list[StudentStats]:
    """Students with at least one missed session, most misses first."""
    ranked = sorted(
        (s for s in student_stats if s.missed_sessions > 0),
        key=lambda s: s.missed_sessions,
        reverse=True,
    )
    return ranked if limit is None else ranked[:limit]


def weekly_checkins(
    snapshot: Snapshot,
    reference: date | None = None,
    stats_filter: StatsFilter | None = None,
    *,
    schedule: Schedule | None = None,
    today: date | None = None,
) -> list[WeeklyCheckIn]:
    """Required days of the reference week: submitted, excused or missing."""
    if schedule is None:
        schedule = DEFAULT_SCHEDULE
    interval = resolve_period(PeriodType.WEEK, reference, today=today)
    required = schedule.required_dates(interval)

    window = records_by_student(
        filter_records(snapshot.records, interval, snapshot.students, stats_filter)
    )
    absent = _absence_dates(snapshot.absences, interval)

    checkins: list[WeeklyCheckIn] = []
    for student in students_in_scope(snapshot.students, stats_filter):
        mine = window.get(student.student_key, [])
        filed = {effective_date(r) for r in mine}
        excused_days = absent.get(student.student_key, set())
        checkins.append(WeeklyCheckIn(
            student_key=student.student_key,
            display_name=student.display_name,
            submitted=tuple(d for d in required if d in filed),
            excused=tuple(d for d in required if d not in filed and d in excused_days),
            missing=tuple(
                d for d in required if d not in filed and d not in excused_days
            ),
            week_duration=sum(record_duration(r) for r in mine),
        ))
    return checkins


def daily_activity(
    snapshot: Snapshot,
    day: date,
    stats_filter: StatsFilter | None = None,
) -> list[DailyActivity]:
    """Who reported on *day*.  The latest record (by ``created_at``) supplies
    the time and duration shown."""
    window = records_by_student(
        filter_records(snapshot.records, Interval(day, day), snapshot.students, stats_filter)
    )
    activity: list[DailyActivity] = []
    for student in students_in_scope(snapshot.students, stats_filter):
        mine = sorted(window.get(student.student_key, []), key=sort_key)
        if not mine:
            activity.append(DailyActivity(student.student_key, student.display_name))
            continue
        latest = mine[-1]
        activity.append(DailyActivity(
            student_key=student.student_key,
            display_name=student.display_name,
            has_record=True,
            record_count=len(mine),
            time_of_day=latest.time_of_day,
            duration_minutes=record_duration(latest),
        ))
    return activity
