"""Tests for badge derivation."""

from datetime import date, datetime

import pytest

from rollcall.analytics.badges import (
    BADGES,
    EARLY_BIRD,
    LEGEND,
    NIGHT_OWL,
    ON_FIRE,
    PERFECTIONIST,
    WARMING_UP,
    derive_badges,
    get_badge,
    streak_badge,
    timing_badges,
)

from helpers import rec, run

DAY = date(2024, 5, 6)


def _at_hours(hours):
    return [rec("a", DAY, hour=h) for h in hours]


class TestStreakTier:

    @pytest.mark.parametrize("streak, badge", [
        (0, None),
        (2, None),
        (3, WARMING_UP),
        (9, WARMING_UP),
        (10, ON_FIRE),
        (29, ON_FIRE),
        (30, LEGEND),
        (365, LEGEND),
    ])
    def test_thresholds(self, streak, badge):
        assert streak_badge(streak) == badge

    def test_only_one_streak_badge(self):
        badges = derive_badges([], completion_rate=0, max_streak=45)
        assert [b for b in badges if b.category == "streak"] == [LEGEND]


class TestTimingBadges:

    def test_early_bird(self):
        """Six reports at 6, 7 and 8 o'clock: all early, none late."""
        badges = timing_badges(_at_hours([6, 7, 8, 6, 7, 8]))
        assert EARLY_BIRD in badges
        assert NIGHT_OWL not in badges

    def test_night_owl(self):
        badges = timing_badges(_at_hours([20, 21, 22, 23, 12, 12]))
        assert badges == [NIGHT_OWL]

    def test_both_can_apply(self):
        badges = timing_badges(_at_hours([6, 7, 8, 21, 22, 23, 12]))
        assert badges == [EARLY_BIRD, NIGHT_OWL]

    def test_needs_more_than_five_records(self):
        assert timing_badges(_at_hours([6, 6, 6, 6, 6])) == []

    def test_share_must_exceed_thirty_percent(self):
        # 3 of 10 is exactly 30%
        assert timing_badges(_at_hours([6, 6, 6] + [12] * 7)) == []
        assert timing_badges(_at_hours([6, 6, 6, 6] + [12] * 6)) == [EARLY_BIRD]

    def test_nine_o_clock_is_not_early(self):
        assert timing_badges(_at_hours([9] * 6)) == []

    def test_eight_pm_is_late(self):
        assert timing_badges(_at_hours([20] * 6)) == [NIGHT_OWL]

    def test_falls_back_to_created_hour(self):
        records = [
            rec("a", DAY, created_at=datetime(2024, 5, 6, 5, 30)) for _ in range(6)
        ]
        assert timing_badges(records) == [EARLY_BIRD]

    def test_unknown_hours_dilute_the_share(self):
        unknown = [rec("a", DAY, created_at=None) for _ in range(5)]
        records = _at_hours([6, 6]) + unknown
        # 2 of 7 known-early is under 30%
        assert timing_badges(records) == []


class TestPerfectionist:

    def test_full_completion_with_history(self):
        badges = derive_badges(_at_hours([12] * 6), completion_rate=100, max_streak=0)
        assert PERFECTIONIST in badges

    def test_needs_more_than_five_records(self):
        badges = derive_badges(_at_hours([12] * 5), completion_rate=100, max_streak=0)
        assert PERFECTIONIST not in badges

    def test_over_one_hundred_is_not_perfect(self):
        badges = derive_badges(_at_hours([12] * 6), completion_rate=125, max_streak=0)
        assert PERFECTIONIST not in badges


class TestDeriveBadges:

    def test_nothing_earned(self):
        assert derive_badges([], completion_rate=50, max_streak=1) == []

    def test_combined(self):
        history = run("a", DAY, 6, hour=7)
        badges = derive_badges(history, completion_rate=100, max_streak=6)
        assert badges == [WARMING_UP, EARLY_BIRD, PERFECTIONIST]

    def test_catalog_lookup(self):
        assert get_badge("night_owl") is NIGHT_OWL
        assert get_badge("missing") is None
        assert len({b.key for b in BADGES}) == len(BADGES)
