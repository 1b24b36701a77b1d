"""SM-2 style review interval calculation.

This module provides an interface for different scheduling algorithms.
The confidence-based scheduler is the default implementation.

Unlike canonical SM-2, the interval is a function of the review count alone
(``ease ** (review_count - 1)``) rather than a multiple of the previous
interval, so no interval history needs to be stored.
"""
import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000
MAX_INTERVAL_DAYS = 180.0
DEFAULT_EASE = 1.5

EASE_FACTORS = {
    5: 2.5,
    4: 2.0,
    3: 1.5,
    2: 1.2,
    1: 1.0,  # reset case, interval is always 1 day
}


class Scheduler(Protocol):
    """Protocol for review schedulers."""

    def next_schedule(self, review_count: int, confidence: int, anchor_ms: int) -> "ReviewResult":
        """Calculate next review schedule from a solve event."""
        ...


@dataclass
class ReviewResult:
    """Result of a review scheduling calculation."""
    interval_days: float
    ease: float
    next_review_at: int


def ease_factor(confidence: int) -> float:
    """Map a confidence rating to an ease factor, falling back to 1.5."""
    ease = EASE_FACTORS.get(confidence)
    if ease is None:
        logger.warning("Confidence %r outside 1-5, using default ease %s", confidence, DEFAULT_EASE)
        return DEFAULT_EASE
    return ease


def _grow(review_count: int, ease: float) -> float:
    if review_count <= 1:
        days = 1.0
    else:
        days = ease ** (review_count - 1)
    return min(days, MAX_INTERVAL_DAYS)


def interval_days(review_count: int, confidence: int) -> float:
    """Days until the next review, capped at MAX_INTERVAL_DAYS."""
    # Didn't remember: always back to a daily review.
    if confidence == 1:
        return 1.0
    return _grow(review_count, ease_factor(confidence))


class ConfidenceScheduler:
    """Confidence-driven spaced repetition schedule.

    Confidence (1-5) is the only retention signal:
        1 - Didn't remember, reset to 1 day
        2 - Hard recall (ease 1.2)
        3 - Medium (ease 1.5)
        4 - Easy recall (ease 2.0)
        5 - Very confident (ease 2.5)
    """

    @staticmethod
    def next_schedule(review_count: int, confidence: int, anchor_ms: int) -> ReviewResult:
        """Calculate the next review time for a solve event.

        Args:
            review_count: Number of solves including this one (>= 1)
            confidence: Self-reported confidence of this solve
            anchor_ms: Epoch milliseconds of this solve

        Returns:
            ReviewResult with the interval and due timestamp
        """
        days = interval_days(review_count, confidence)
        return ReviewResult(
            interval_days=days,
            ease=EASE_FACTORS.get(confidence, DEFAULT_EASE),
            next_review_at=anchor_ms + round(days * DAY_MS),
        )


# Default scheduler instance
default_scheduler = ConfidenceScheduler()
