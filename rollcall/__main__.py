"""Allow running RollCall as a module: python -m rollcall."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from .analytics import (
    PeriodType,
    StatsFilter,
    compute_distributions,
    compute_group_stats,
    compute_student_stats,
    daily_activity,
    leaderboard,
    most_missed,
    period_label,
    resolve_period,
    summarize,
    weekly_checkins,
    windowed_records,
)
from .database.db import configure_engine, init_db
from .database.store import load_snapshot
from .errors import DataFetchError
from .report import (
    format_hour,
    render_checkins,
    render_daily,
    render_groups,
    render_most_missed,
    render_students,
    render_summary,
    write_csv,
)
from .settings import load_settings

logger = logging.getLogger("rollcall")


def _parse_args(argv: list[str] | None, default_period: str) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rollcall", description="Attendance statistics for student groups.",
    )
    parser.add_argument(
        "--period", default=default_period,
        choices=[p.value for p in PeriodType],
    )
    parser.add_argument(
        "--date", type=date.fromisoformat, default=None,
        help="reference date (YYYY-MM-DD), defaults to today",
    )
    parser.add_argument("--group", type=int, default=None, help="group id")
    parser.add_argument("--student", default=None, help="student key")
    parser.add_argument("--csv", default=None, help="write student stats to this file")
    parser.add_argument("--db", default=None, help="database URL")
    parser.add_argument("--busiest-hours", action="store_true")
    parser.add_argument(
        "--checkins", action="store_true",
        help="show required days submitted, excused and missing in the reference week",
    )
    parser.add_argument(
        "--day", type=date.fromisoformat, default=None,
        help="show who reported on this date (YYYY-MM-DD)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    args = _parse_args(argv, settings.default_period)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    url = args.db or settings.database_url
    if url:
        configure_engine(url)
    init_db()

    try:
        snapshot = load_snapshot()
    except DataFetchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    stats_filter = StatsFilter(group_id=args.group, student_key=args.student)
    options = dict(
        schedule=settings.schedule(), system_start=settings.system_start(),
    )
    students = leaderboard(
        compute_student_stats(snapshot, args.period, args.date, stats_filter, **options),
        limit=None,
    )
    groups = compute_group_stats(snapshot, args.period, args.date, stats_filter, **options)
    interval, records = windowed_records(
        snapshot, args.period, args.date, stats_filter,
        system_start=options["system_start"],
    )

    print(render_summary(summarize(students), period_label(args.period, interval)))
    if PeriodType.parse(args.period).is_bounded:
        print(render_most_missed(most_missed(students)))
    print()
    print(render_students(students))
    if groups:
        print()
        print(render_groups(groups))

    if args.busiest_hours:
        hourly = compute_distributions(records, end=interval.end, days=settings.trend_days)["hourly"]
        busiest = sorted(hourly, key=lambda b: b["sessions"], reverse=True)[:3]
        print()
        print("Busiest hours: " + ", ".join(
            f"{format_hour(b['hour'])} ({b['sessions']})" for b in busiest if b["sessions"]
        ))

    if args.checkins:
        checkins = weekly_checkins(
            snapshot, args.date, stats_filter, schedule=options["schedule"],
        )
        print()
        print(period_label(PeriodType.WEEK, resolve_period(PeriodType.WEEK, args.date)))
        print(render_checkins(checkins))

    if args.day:
        print()
        print(period_label(PeriodType.DAY, resolve_period(PeriodType.DAY, args.day)))
        print(render_daily(daily_activity(snapshot, args.day, stats_filter)))

    if args.csv:
        with open(args.csv, "w", newline="", encoding="utf-8") as fp:
            count = write_csv(students, fp)
        logger.info("Wrote %d rows to %s", count, args.csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
