# Scheduling algorithms
from .sm2 import (
    ConfidenceScheduler,
    ReviewResult,
    Scheduler,
    default_scheduler,
    ease_factor,
    interval_days,
)
from .streak import advance_streak, day_of, live_streak

__all__ = [
    "ConfidenceScheduler",
    "ReviewResult",
    "Scheduler",
    "default_scheduler",
    "ease_factor",
    "interval_days",
    "advance_streak",
    "day_of",
    "live_streak",
]
