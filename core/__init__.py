# Domain models
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class Difficulty(str, Enum):
    """Problem difficulty. Informational only, never used in scheduling."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


@dataclass(frozen=True)
class ProblemProgress:
    """Practice history of one problem."""
    item_id: str
    solved_at: tuple[int, ...]
    difficulty: Difficulty
    confidence: int
    next_review_at: int
    review_count: int
    time_spent: Optional[float] = None


@dataclass(frozen=True)
class ProgressState:
    """Snapshot of all practice progress.

    Snapshots are never mutated; the scheduler builds a new one per change.
    `items` is a read-only view over a private copy of the given mapping.
    """
    items: Mapping[str, ProblemProgress] = field(default_factory=dict)
    last_activity_date: str = ""
    streak_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "items", MappingProxyType(dict(self.items)))


@dataclass(frozen=True)
class Activity:
    """One solve event."""
    item: ProblemProgress
    timestamp: int


@dataclass(frozen=True)
class CatalogItem:
    """Catalog entry mapping a problem to its category."""
    item_id: str
    category: str


@dataclass
class CategoryProgress:
    solved: int = 0
    total: int = 0
