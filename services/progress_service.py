# Practice progress service
"""
Owns the practice history: records solves, schedules reviews, keeps the daily
streak, persists after every change and notifies subscribers.
"""
import itertools
import logging
import math
import threading
import time
from dataclasses import replace
from typing import Callable, Iterable, Optional, Union

from core import (
    Activity,
    CatalogItem,
    CategoryProgress,
    Difficulty,
    ProblemProgress,
    ProgressState,
)
from scheduler import Scheduler, advance_streak, day_of, default_scheduler, live_streak
from storage import ProgressStore

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def now_ms() -> int:
    return int(time.time() * 1000)


def _check_number(name: str, value) -> None:
    # bool is an int subclass but never a rating or a duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


class ProgressScheduler:
    """Single source of truth for practice history and review scheduling."""

    def __init__(
        self,
        store: ProgressStore,
        clock: Callable[[], int] = now_ms,
        scheduler: Scheduler = default_scheduler,
    ):
        self.store = store
        self.clock = clock
        self.scheduler = scheduler
        self._lock = threading.Lock()
        self._listeners: dict[int, Listener] = {}
        self._handles = itertools.count()

        loaded = store.load()
        if loaded is None:
            logger.info("No saved progress, starting empty")
            loaded = ProgressState()
        self._state = loaded

    @property
    def state(self) -> ProgressState:
        """Current snapshot. Treat as read-only."""
        return self._state

    # --- notifications -------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every mutation. Returns unsubscribe."""
        handle = next(self._handles)
        self._listeners[handle] = listener

        def unsubscribe() -> None:
            self._listeners.pop(handle, None)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener()
            except Exception:
                logger.exception("Progress listener %r failed", listener)

    def _commit(self, new_state: ProgressState) -> None:
        self._state = new_state
        if not self.store.save(new_state):
            logger.warning("Progress kept in memory only, save failed")

    # --- mutations -----------------------------------------------------

    def mark_solved(
        self,
        item_id: str,
        difficulty: Union[Difficulty, str],
        confidence: int,
        time_spent: Optional[float] = None,
    ) -> ProblemProgress:
        """Record a solve of `item_id` and reschedule its next review.

        Confidence outside 1-5 is kept and scheduled with the default ease;
        confidence and time_spent must still be finite numbers.
        """
        item_id = str(item_id)
        difficulty = Difficulty(difficulty)
        _check_number("confidence", confidence)
        if time_spent is not None:
            _check_number("time_spent", time_spent)
        with self._lock:
            now = self.clock()
            state = self._state
            existing = state.items.get(item_id)

            review_count = existing.review_count + 1 if existing else 1
            solved_at = existing.solved_at + (now,) if existing else (now,)
            result = self.scheduler.next_schedule(review_count, confidence, now)
            if time_spent is None and existing:
                time_spent = existing.time_spent

            progress = ProblemProgress(
                item_id=item_id,
                solved_at=solved_at,
                difficulty=difficulty,
                confidence=confidence,
                next_review_at=result.next_review_at,
                review_count=review_count,
                time_spent=time_spent,
            )
            last_activity_date, streak_count = advance_streak(
                state.last_activity_date, state.streak_count, day_of(now)
            )
            self._commit(replace(
                state,
                items={**state.items, item_id: progress},
                last_activity_date=last_activity_date,
                streak_count=streak_count,
            ))

        logger.debug(
            "Solved %s (review %d, confidence %s), next review in %.2f days",
            item_id, review_count, confidence, result.interval_days,
        )
        self._notify()
        return progress

    def reset_all(self) -> None:
        """Clear all records and the streak."""
        with self._lock:
            self._commit(ProgressState())
        logger.info("Progress reset")
        self._notify()

    # --- queries -------------------------------------------------------

    def get_progress(self, item_id: str) -> Optional[ProblemProgress]:
        return self._state.items.get(str(item_id))

    def get_solved_items(self) -> list[ProblemProgress]:
        return list(self._state.items.values())

    def get_due_for_review(self) -> list[ProblemProgress]:
        """Records due now, soonest first."""
        now = self.clock()
        due = [p for p in self._state.items.values() if p.next_review_at <= now]
        return sorted(due, key=lambda p: p.next_review_at)

    def get_streak(self) -> int:
        """Streak count, or 0 if it lapsed since the last activity."""
        state = self._state
        return live_streak(state.last_activity_date, state.streak_count, day_of(self.clock()))

    def get_recent_activity(self, limit: int = 10) -> list[Activity]:
        """Most recent solve events across all items, newest first."""
        activities = [
            Activity(item=p, timestamp=ts)
            for p in self._state.items.values()
            for ts in p.solved_at
        ]
        activities.sort(key=lambda a: a.timestamp, reverse=True)
        return activities[:max(limit, 0)]

    def get_counts_by_difficulty(self) -> dict[Difficulty, int]:
        counts = {d: 0 for d in Difficulty}
        for p in self._state.items.values():
            counts[p.difficulty] += 1
        return counts

    def get_counts_by_category(self, catalog: Iterable[CatalogItem]) -> dict[str, CategoryProgress]:
        """Solved/total counts per category of a caller-supplied catalog."""
        items = self._state.items
        categories: dict[str, CategoryProgress] = {}
        for entry in catalog:
            counts = categories.setdefault(entry.category, CategoryProgress())
            counts.total += 1
            if entry.item_id in items:
                counts.solved += 1
        return categories
