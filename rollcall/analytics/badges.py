"""Achievement badges derived from a student's history.

Badge Catalog
-------------
**Streak** (highest qualifying tier only, by longest streak):

    >= 30 days   Legend
    >= 10 days   On Fire
    >=  3 days   Warming Up

**Timing** (needs more than 5 records; both may apply):

    Early Bird   over 30% of reports sent before 09:00
    Night Owl    over 30% of reports sent at or after 20:00

**Performance**:

    Perfectionist   100% completion in the window and more than 5 records

Badges are recomputed on every call and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .records import SessionRecord, record_hour


# ── catalog ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BadgeDef:
    key: str
    name: str
    category: str       # streak | timing | performance
    description: str


LEGEND = BadgeDef("legend", "Legend", "streak", "30-day streak reached.")
ON_FIRE = BadgeDef("on_fire", "On Fire", "streak", "10-day streak reached.")
WARMING_UP = BadgeDef("warming_up", "Warming Up", "streak", "3-day streak reached.")
EARLY_BIRD = BadgeDef("early_bird", "Early Bird", "timing", "Reports mostly before 9 AM.")
NIGHT_OWL = BadgeDef("night_owl", "Night Owl", "timing", "Reports mostly after 8 PM.")
PERFECTIONIST = BadgeDef(
    "perfectionist", "Perfectionist", "performance", "Every expected session filed.",
)

# Ordered descending so the first match wins.
STREAK_TIERS: list[tuple[int, BadgeDef]] = [
    (30, LEGEND),
    (10, ON_FIRE),
    (3, WARMING_UP),
]

BADGES: list[BadgeDef] = [
    LEGEND, ON_FIRE, WARMING_UP, EARLY_BIRD, NIGHT_OWL, PERFECTIONIST,
]

# ── thresholds ────────────────────────────────────────────────────────────

MIN_RECORDS = 5             # strictly more than this many records
TIMING_SHARE = 0.3          # strictly more than this fraction
EARLY_BEFORE_HOUR = 9
NIGHT_FROM_HOUR = 20

_BADGE_MAP: dict[str, BadgeDef] = {b.key: b for b in BADGES}


def get_badge(key: str) -> BadgeDef | None:
    return _BADGE_MAP.get(key)


# ── rules ─────────────────────────────────────────────────────────────────


def streak_badge(max_streak: int) -> BadgeDef | None:
    for threshold, badge in STREAK_TIERS:
        if max_streak >= threshold:
            return badge
    return None


def timing_badges(history: Sequence[SessionRecord]) -> list[BadgeDef]:
    """Early Bird / Night Owl.  Records with no known hour count in the
    denominator but never match a bucket."""
    total = len(history)
    if total <= MIN_RECORDS:
        return []
    hours = [record_hour(r) for r in history]
    early = sum(1 for h in hours if h is not None and h < EARLY_BEFORE_HOUR)
    late = sum(1 for h in hours if h is not None and h >= NIGHT_FROM_HOUR)

    earned: list[BadgeDef] = []
    if early / total > TIMING_SHARE:
        earned.append(EARLY_BIRD)
    if late / total > TIMING_SHARE:
        earned.append(NIGHT_OWL)
    return earned


def derive_badges(
    history: Iterable[SessionRecord],
    completion_rate: int,
    max_streak: int,
) -> list[BadgeDef]:
    """All badges a student holds, in catalog order."""
    history = list(history)
    earned: list[BadgeDef] = []

    tier = streak_badge(max_streak)
    if tier is not None:
        earned.append(tier)

    earned.extend(timing_badges(history))

    if completion_rate == 100 and len(history) > MIN_RECORDS:
        earned.append(PERFECTIONIST)

    return earned
