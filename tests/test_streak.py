import unittest
from datetime import date

from scheduler.streak import advance_streak, day_of, live_streak


class TestDayOf(unittest.TestCase):

    def test_utc_calendar_day(self):
        """Timestamps map to their UTC date."""
        self.assertEqual(day_of(1_704_067_200_000), date(2024, 1, 1))
        self.assertEqual(day_of(1_704_067_200_000 - 1), date(2023, 12, 31))


class TestAdvanceStreak(unittest.TestCase):
    """Tests for the streak state machine."""

    def test_first_activity_starts_at_one(self):
        self.assertEqual(advance_streak("", 0, date(2024, 1, 1)), ("2024-01-01", 1))

    def test_same_day_unchanged(self):
        """A second activity on the same day should not double count."""
        self.assertEqual(advance_streak("2024-01-01", 4, date(2024, 1, 1)), ("2024-01-01", 4))

    def test_next_day_increments(self):
        self.assertEqual(advance_streak("2024-01-01", 4, date(2024, 1, 2)), ("2024-01-02", 5))

    def test_month_boundary_is_consecutive(self):
        self.assertEqual(advance_streak("2024-02-29", 2, date(2024, 3, 1)), ("2024-03-01", 3))

    def test_gap_restarts(self):
        """Missing a day restarts the streak at 1."""
        self.assertEqual(advance_streak("2024-01-01", 9, date(2024, 1, 3)), ("2024-01-03", 1))

    def test_unparseable_date_restarts(self):
        self.assertEqual(advance_streak("garbage", 9, date(2024, 1, 3)), ("2024-01-03", 1))


class TestLiveStreak(unittest.TestCase):
    """Tests for read-only streak evaluation."""

    def test_active_today(self):
        self.assertEqual(live_streak("2024-01-05", 3, date(2024, 1, 5)), 3)

    def test_active_yesterday(self):
        self.assertEqual(live_streak("2024-01-04", 3, date(2024, 1, 5)), 3)

    def test_lapsed(self):
        """Older than yesterday reads as zero."""
        self.assertEqual(live_streak("2024-01-03", 3, date(2024, 1, 5)), 0)

    def test_never_active(self):
        self.assertEqual(live_streak("", 0, date(2024, 1, 5)), 0)


if __name__ == "__main__":
    unittest.main()
