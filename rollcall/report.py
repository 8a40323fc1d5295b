"""Plain-text and CSV renderings of student statistics."""

from __future__ import annotations

import csv
from typing import IO, Iterable, Sequence

from .analytics.stats import (
    DailyActivity, GroupStats, StudentStats, Summary, WeeklyCheckIn,
)


CSV_COLUMNS = [
    "Name", "Key", "Total Hours", "Sessions", "Completion %", "Max Streak", "Badges",
]


# ── format helpers ────────────────────────────────────────────────────────


def format_duration(total_minutes: int) -> str:
    """125 → '2h 5m', 120 → '2h', 45 → '45m', 0 → '0m'."""
    if total_minutes <= 0:
        return "0m"
    hours = total_minutes // 60
    mins = total_minutes % 60
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_hour(hour: int | None) -> str:
    """14 → '2 PM', None → '—'."""
    if hour is None:
        return "—"
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def format_hours(total_minutes: int) -> str:
    return f"{total_minutes / 60:.1f}"


# ── CSV ───────────────────────────────────────────────────────────────────


def csv_row(stats: StudentStats) -> list:
    return [
        stats.display_name,
        stats.student_key,
        format_hours(stats.total_duration),
        stats.session_count,
        stats.completion_rate,
        stats.max_streak,
        "; ".join(stats.badge_names),
    ]


def write_csv(student_stats: Iterable[StudentStats], fp: IO[str]) -> int:
    """Write one row per student; returns the number of rows written."""
    writer = csv.writer(fp)
    writer.writerow(CSV_COLUMNS)
    count = 0
    for stats in student_stats:
        writer.writerow(csv_row(stats))
        count += 1
    return count


# ── text tables ───────────────────────────────────────────────────────────


def _table(headers: Sequence[str], rows: Sequence[Sequence[object]]) -> str:
    cells = [[str(c) for c in row] for row in rows]
    widths = [
        max([len(h)] + [len(r[i]) for r in cells]) for i, h in enumerate(headers)
    ]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for row in cells:
        lines.append("  ".join(c.ljust(w) for c, w in zip(row, widths)))
    return "\n".join(lines)


def render_students(student_stats: Sequence[StudentStats]) -> str:
    rows = [
        (
            f"#{rank}",
            s.display_name,
            s.session_count,
            s.missed_sessions,
            format_duration(s.total_duration),
            format_duration(s.avg_duration),
            f"{s.completion_rate}%",
            s.current_streak,
            s.max_streak,
            ", ".join(s.badge_names),
        )
        for rank, s in enumerate(student_stats, start=1)
    ]
    return _table(
        ["Rank", "Student", "Sessions", "Missed", "Total", "Avg", "Done",
         "Streak", "Best", "Badges"],
        rows,
    )


def render_groups(group_stats: Sequence[GroupStats]) -> str:
    rows = [
        (
            g.name,
            g.student_count,
            g.session_count,
            format_duration(g.total_duration),
            format_duration(g.avg_duration),
            g.missed_sessions,
            f"{g.avg_completion_rate}%",
        )
        for g in group_stats
    ]
    return _table(
        ["Group", "Students", "Sessions", "Total", "Avg", "Missed", "Done"], rows,
    )


def render_summary(summary: Summary, label: str) -> str:
    return (
        f"{label}: {format_duration(summary.total_duration)} total, "
        f"{summary.total_sessions} sessions, {summary.total_missed} missed, "
        f"{summary.avg_completion_rate}% avg completion "
        f"({summary.student_count} students)"
    )


def render_most_missed(student_stats: Sequence[StudentStats]) -> str:
    if not student_stats:
        return "Most missed: nobody"
    return "Most missed: " + ", ".join(
        f"{s.display_name} ({s.missed_sessions})" for s in student_stats
    )


def render_checkins(checkins: Sequence[WeeklyCheckIn]) -> str:
    rows = [
        (
            c.display_name,
            ", ".join(d.strftime("%a") for d in c.submitted) or "-",
            ", ".join(d.strftime("%a") for d in c.excused) or "-",
            ", ".join(d.strftime("%a") for d in c.missing) or "-",
            format_duration(c.week_duration),
        )
        for c in checkins
    ]
    return _table(["Student", "Submitted", "Excused", "Missing", "Total"], rows)


def render_daily(activity: Sequence[DailyActivity]) -> str:
    rows = [
        (
            a.display_name,
            "yes" if a.has_record else "no",
            a.record_count,
            a.time_of_day.strftime("%H:%M") if a.time_of_day else "—",
            format_duration(a.duration_minutes) if a.has_record else "—",
        )
        for a in activity
    ]
    return _table(["Student", "Reported", "Records", "Time", "Duration"], rows)
