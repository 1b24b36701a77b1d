import unittest

from scheduler.sm2 import (
    DAY_MS,
    MAX_INTERVAL_DAYS,
    ConfidenceScheduler,
    ReviewResult,
    ease_factor,
    interval_days,
)

T0 = 1_704_067_200_000  # 2024-01-01T00:00:00Z


class TestEaseFactor(unittest.TestCase):
    """Tests for confidence to ease mapping."""

    def test_known_confidences(self):
        """Each confidence 2-5 should map to its ease factor."""
        self.assertEqual(ease_factor(5), 2.5)
        self.assertEqual(ease_factor(4), 2.0)
        self.assertEqual(ease_factor(3), 1.5)
        self.assertEqual(ease_factor(2), 1.2)

    def test_out_of_range_falls_back(self):
        """Confidence outside 1-5 should use ease 1.5 and log a warning."""
        with self.assertLogs("scheduler.sm2", level="WARNING"):
            self.assertEqual(ease_factor(0), 1.5)
        with self.assertLogs("scheduler.sm2", level="WARNING"):
            self.assertEqual(ease_factor(9), 1.5)


class TestIntervalDays(unittest.TestCase):
    """Tests for the interval formula."""

    def test_first_review_is_one_day(self):
        """review_count <= 1 always waits one day regardless of ease."""
        for confidence in (2, 3, 4, 5):
            self.assertEqual(interval_days(1, confidence), 1.0)

    def test_growth_uses_review_count_exponent(self):
        """Interval is ease ** (review_count - 1)."""
        self.assertEqual(interval_days(2, 5), 2.5)
        self.assertEqual(interval_days(3, 4), 4.0)
        self.assertAlmostEqual(interval_days(4, 2), 1.2 ** 3)

    def test_confidence_one_resets(self):
        """Confidence 1 is always one day, however many reviews."""
        for review_count in (1, 2, 5, 40):
            self.assertEqual(interval_days(review_count, 1), 1.0)

    def test_interval_capped(self):
        """No combination of count and confidence exceeds 180 days."""
        for review_count in range(1, 60):
            for confidence in range(1, 6):
                self.assertLessEqual(interval_days(review_count, confidence), MAX_INTERVAL_DAYS)
        self.assertEqual(interval_days(20, 5), 180.0)


class TestConfidenceScheduler(unittest.TestCase):
    """Tests for the scheduler result."""

    def test_next_review_anchored_on_solve(self):
        """Due time is the anchor plus the interval in milliseconds."""
        result = ConfidenceScheduler.next_schedule(review_count=2, confidence=5, anchor_ms=T0)

        self.assertIsInstance(result, ReviewResult)
        self.assertEqual(result.interval_days, 2.5)
        self.assertEqual(result.ease, 2.5)
        self.assertEqual(result.next_review_at, T0 + 216_000_000)

    def test_reset_ignores_review_count(self):
        result = ConfidenceScheduler.next_schedule(review_count=9, confidence=1, anchor_ms=T0)

        self.assertEqual(result.interval_days, 1.0)
        self.assertEqual(result.next_review_at, T0 + DAY_MS)

    def test_capped_due_time(self):
        result = ConfidenceScheduler.next_schedule(review_count=30, confidence=5, anchor_ms=T0)

        self.assertEqual(result.next_review_at, T0 + 180 * DAY_MS)

    def test_matches_interval_days(self):
        """The due time always uses the shared interval formula."""
        for review_count in range(1, 12):
            for confidence in (1, 2, 3, 4, 5):
                result = ConfidenceScheduler.next_schedule(review_count, confidence, T0)
                self.assertEqual(result.interval_days, interval_days(review_count, confidence))

    def test_out_of_range_warns_once(self):
        with self.assertLogs("scheduler.sm2", level="WARNING") as logs:
            result = ConfidenceScheduler.next_schedule(review_count=2, confidence=0, anchor_ms=T0)

        self.assertEqual(len(logs.records), 1)
        self.assertEqual(result.ease, 1.5)
        self.assertEqual(result.next_review_at, T0 + round(1.5 * DAY_MS))

    def test_next_review_is_integer(self):
        """Fractional intervals are rounded to whole milliseconds."""
        result = ConfidenceScheduler.next_schedule(review_count=4, confidence=2, anchor_ms=T0)

        self.assertIsInstance(result.next_review_at, int)
        self.assertEqual(result.next_review_at, T0 + round(1.2 ** 3 * DAY_MS))


if __name__ == "__main__":
    unittest.main()
