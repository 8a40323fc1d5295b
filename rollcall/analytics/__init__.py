"""Statistics engine package."""

from .periods import (
    PeriodType,
    Interval,
    SYSTEM_START_DATE,
    resolve_period,
    shift_reference,
    navigate,
    period_label,
)
from .schedule import Schedule, DEFAULT_SCHEDULE, WEEKDAY_NAMES
from .records import (
    SessionRecord,
    Student,
    Group,
    Absence,
    Snapshot,
    StatsFilter,
    effective_date,
    filter_records,
)
from .streaks import Streaks, compute_streaks
from .badges import BadgeDef, BADGES, derive_badges
from .stats import (
    StudentStats,
    GroupStats,
    Summary,
    WeeklyCheckIn,
    DailyActivity,
    compute_student_stats,
    compute_group_stats,
    rollup_groups,
    windowed_records,
    summarize,
    leaderboard,
    most_missed,
    weekly_checkins,
    daily_activity,
)
from .distributions import compute_distributions

__all__ = [
    "PeriodType",
    "Interval",
    "SYSTEM_START_DATE",
    "resolve_period",
    "shift_reference",
    "navigate",
    "period_label",
    "Schedule",
    "DEFAULT_SCHEDULE",
    "WEEKDAY_NAMES",
    "SessionRecord",
    "Student",
    "Group",
    "Absence",
    "Snapshot",
    "StatsFilter",
    "effective_date",
    "filter_records",
    "Streaks",
    "compute_streaks",
    "BadgeDef",
    "BADGES",
    "derive_badges",
    "StudentStats",
    "GroupStats",
    "Summary",
    "WeeklyCheckIn",
    "DailyActivity",
    "compute_student_stats",
    "compute_group_stats",
    "rollup_groups",
    "windowed_records",
    "summarize",
    "leaderboard",
    "most_missed",
    "weekly_checkins",
    "daily_activity",
    "compute_distributions",
]
