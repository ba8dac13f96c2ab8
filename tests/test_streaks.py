"""
Deterministic tests for streak calculation and recalculation.

⚠️ The transition table here is the contract for calculate_updated_streak.
"""

import pytest
from datetime import date, timedelta, timezone

from journal_progress.engine.dates import to_local_date_string
from journal_progress.engine.errors import DateParseError, StreakContractError
from journal_progress.engine.streaks import (
    calculate_updated_streak,
    recalculate_streak_from_dates,
)
from journal_progress.models.progress import StreakUpdate


UTC = timezone.utc


def _consecutive_days(start: date, count: int) -> list[str]:
    return [(start + timedelta(days=i)).isoformat() for i in range(count)]


class TestCalculateUpdatedStreak:
    """Transition table for a single new entry."""

    def test_first_entry_starts_at_one(self):
        """No previous entry → streak 1."""
        assert calculate_updated_streak(0, None, "2026-02-10") == StreakUpdate(
            new_streak=1, last_entry_date="2026-02-10"
        )

    def test_empty_last_entry_date_counts_as_absent(self):
        update = calculate_updated_streak(0, "", "2026-02-10")
        assert update.new_streak == 1

    def test_same_day_keeps_streak(self):
        """Re-saving on the same day never changes the streak."""
        update = calculate_updated_streak(5, "2026-02-10", "2026-02-10")
        assert update.new_streak == 5
        assert update.last_entry_date == "2026-02-10"

    def test_same_day_floors_at_one(self):
        """A zero streak with a prior entry today becomes 1."""
        assert calculate_updated_streak(0, "2026-02-16", "2026-02-16").new_streak == 1

    def test_next_day_increments(self):
        assert calculate_updated_streak(5, "2026-02-10", "2026-02-11").new_streak == 6
        assert calculate_updated_streak(1, "2026-02-15", "2026-02-16").new_streak == 2

    def test_gap_resets(self):
        assert calculate_updated_streak(5, "2026-02-10", "2026-02-20").new_streak == 1
        assert calculate_updated_streak(10, "2026-02-14", "2026-02-16").new_streak == 1
        assert calculate_updated_streak(50, "2026-01-01", "2026-02-16").new_streak == 1

    def test_backdated_entry_resets(self):
        """An entry dated before the last one is treated like a gap."""
        assert calculate_updated_streak(8, "2026-02-10", "2026-02-09").new_streak == 1

    @pytest.mark.parametrize("last, new", [
        ("2026-01-31", "2026-02-01"),
        ("2026-02-28", "2026-03-01"),
        ("2026-03-31", "2026-04-01"),
        ("2025-12-31", "2026-01-01"),
        ("2024-02-29", "2024-03-01"),
    ])
    def test_month_and_year_boundaries_are_consecutive(self, last, new):
        assert calculate_updated_streak(7, last, new).new_streak == 8

    def test_leap_day_gap(self):
        """Feb 28 → Mar 1 skips Feb 29 in a leap year."""
        assert calculate_updated_streak(3, "2024-02-28", "2024-03-01").new_streak == 1

    def test_year_boundary_gap(self):
        assert calculate_updated_streak(5, "2025-12-30", "2026-01-01").new_streak == 1

    def test_iso_last_entry_date(self):
        """A stored ISO timestamp is normalised before comparing."""
        update = calculate_updated_streak(3, "2026-02-15T14:30:00.000Z", "2026-02-16", tz=UTC)
        assert update == StreakUpdate(new_streak=4, last_entry_date="2026-02-16")

    def test_iso_new_entry_date_is_normalised(self):
        """The returned last_entry_date is always date-only."""
        update = calculate_updated_streak(5, "2026-02-16", "2026-02-16T08:00:00Z", tz=UTC)
        assert update == StreakUpdate(new_streak=5, last_entry_date="2026-02-16")

    def test_timezone_decides_the_day(self):
        """23:30 UTC on the 15th is the 16th in UTC+9, one day after the 15th."""
        update = calculate_updated_streak(
            2, "2026-02-15", "2026-02-15T23:30:00Z", tz=timezone(timedelta(hours=9))
        )
        assert update.new_streak == 3
        assert update.last_entry_date == "2026-02-16"

    def test_negative_streak_rejected(self):
        with pytest.raises(StreakContractError):
            calculate_updated_streak(-1, "2026-02-10", "2026-02-11")

    def test_bad_new_date_raises(self):
        with pytest.raises(DateParseError):
            calculate_updated_streak(3, "2026-02-10", "tomorrow")

    def test_bad_last_date_raises(self):
        with pytest.raises(DateParseError):
            calculate_updated_streak(3, "2026-02-31", "2026-02-11")


class TestRecalculateStreakFromDates:
    """Tests for rebuilding a streak from history."""

    TODAY = "2026-02-17"

    def test_empty_history(self):
        assert recalculate_streak_from_dates([], today=self.TODAY) == 0

    def test_only_today(self):
        assert recalculate_streak_from_dates([self.TODAY], today=self.TODAY) == 1

    def test_consecutive_run_ending_today(self):
        dates = ["2026-02-17", "2026-02-16", "2026-02-15", "2026-02-14"]
        assert recalculate_streak_from_dates(dates, today=self.TODAY) == 4

    def test_stops_at_first_gap(self):
        dates = ["2026-02-17", "2026-02-16", "2026-02-14", "2026-02-13"]
        assert recalculate_streak_from_dates(dates, today=self.TODAY) == 2

    def test_zero_when_newest_is_not_today(self):
        dates = ["2026-02-16", "2026-02-15"]
        assert recalculate_streak_from_dates(dates, today=self.TODAY) == 0

    def test_accepts_date_today(self):
        assert recalculate_streak_from_dates(
            ["2026-02-17"], today=date(2026, 2, 17)
        ) == 1

    def test_defaults_to_local_today(self):
        today = date.fromisoformat(to_local_date_string())
        dates = [(today - timedelta(days=i)).isoformat() for i in range(3)]
        assert recalculate_streak_from_dates(dates) == 3

    def test_bad_date_raises(self):
        with pytest.raises(DateParseError):
            recalculate_streak_from_dates(["oops", "2026-02-17"], today="2026-02-18")


class TestReplayMatchesRecalculation:
    """Replaying entries one at a time must agree with full recalculation."""

    @pytest.mark.parametrize("length", [1, 2, 7, 30, 95])
    def test_consecutive_replay(self, length):
        start = date(2025, 12, 1)
        dates = _consecutive_days(start, length)

        streak, last = 0, None
        for entry_date in dates:
            update = calculate_updated_streak(streak, last, entry_date)
            streak, last = update.new_streak, update.last_entry_date

        recalculated = recalculate_streak_from_dates(
            list(reversed(dates)), today=dates[-1]
        )
        assert streak == recalculated == length

    def test_replay_with_gap_and_same_day_resaves(self):
        """Gaps and re-saves land on the same answer as recalculation."""
        entries = [
            "2026-02-01", "2026-02-02", "2026-02-02",
            "2026-02-05", "2026-02-06", "2026-02-06", "2026-02-07",
        ]
        streak, last = 0, None
        for entry_date in entries:
            update = calculate_updated_streak(streak, last, entry_date)
            streak, last = update.new_streak, update.last_entry_date

        distinct_desc = sorted(set(entries), reverse=True)
        assert streak == recalculate_streak_from_dates(distinct_desc, today="2026-02-07") == 3
