"""Application settings with JSON persistence.

Settings are stored at:
    ~/.rollcall/settings.json

Usage::

    settings = load_settings()
    settings.required_weekdays = ["Monday", "Wednesday", "Friday"]
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, field, fields
from datetime import date
from pathlib import Path

from .analytics.periods import SYSTEM_START_DATE, PeriodType
from .analytics.schedule import DEFAULT_REQUIRED_DAYS, Schedule

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".rollcall"
SETTINGS_PATH = APP_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── schedule ──────────────────────────────────────────────────────
    required_weekdays: list[str] = field(
        default_factory=lambda: list(DEFAULT_REQUIRED_DAYS)
    )
    system_start_date: str = SYSTEM_START_DATE.isoformat()   # start of "all"

    # ── reports ───────────────────────────────────────────────────────
    default_period: str = PeriodType.WEEK.value
    trend_days: int = 30

    # ── storage & logging ─────────────────────────────────────────────
    database_url: str | None = None        # None → ~/.rollcall/rollcall.db
    log_level: str = "WARNING"

    def schedule(self) -> Schedule:
        return Schedule.from_names(self.required_weekdays)

    def system_start(self) -> date:
        try:
            return date.fromisoformat(self.system_start_date)
        except (TypeError, ValueError):
            logger.warning(
                "Invalid system_start_date %r, using %s",
                self.system_start_date, SYSTEM_START_DATE,
            )
            return SYSTEM_START_DATE


def _valid_schedule(days) -> bool:
    if isinstance(days, str):
        return False
    try:
        Schedule.from_names(days)
    except (TypeError, ValueError):
        return False
    return True


def _valid_period(value) -> bool:
    try:
        PeriodType.parse(value)
    except ValueError:
        return False
    return True


def _valid_log_level(value) -> bool:
    return isinstance(value, str) and isinstance(logging.getLevelName(value.upper()), int)


_CHECKS = {
    "required_weekdays": _valid_schedule,
    "default_period": _valid_period,
    "log_level": _valid_log_level,
    "trend_days": lambda v: isinstance(v, int) and not isinstance(v, bool) and v > 0,
    "database_url": lambda v: v is None or isinstance(v, str),
}


def _validated(settings: Settings, path: Path) -> Settings:
    """Reset any unusable value to its default, with a warning."""
    defaults = Settings()
    for name, check in _CHECKS.items():
        value = getattr(settings, name)
        if not check(value):
            fallback = getattr(defaults, name)
            logger.warning("Invalid %s %r in %s, using %r", name, value, path, fallback)
            setattr(settings, name, fallback)
    return settings


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return _validated(Settings(**filtered), path)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
    return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
