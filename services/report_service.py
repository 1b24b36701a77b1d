# Practice Report Service
"""
Renders a Markdown practice digest from the progress scheduler's queries.
"""
import datetime as dt
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from core import CatalogItem
from scheduler import day_of
from scheduler.sm2 import DAY_MS
from services.progress_service import ProgressScheduler

logger = logging.getLogger(__name__)


def iso_date(value: date) -> str:
    return value.isoformat()


def format_ts(ts_ms: int) -> str:
    return dt.datetime.fromtimestamp(ts_ms / 1000, tz=dt.timezone.utc).strftime("%Y-%m-%d %H:%M")


def format_overdue(now_ms: int, due_ms: int) -> str:
    days = (now_ms - due_ms) // DAY_MS
    if days <= 0:
        return "due today"
    return "1 day overdue" if days == 1 else f"{days} days overdue"


class ReportService:
    """Service for generating practice reports."""

    def __init__(self, progress: ProgressScheduler, reports_dir: Path):
        self.progress = progress
        self.reports_dir = Path(reports_dir)

    def _collect_stats(self, catalog: Optional[Iterable[CatalogItem]]) -> dict:
        """Collect statistics from the scheduler."""
        return {
            "now": self.progress.clock(),
            "solved": self.progress.get_solved_items(),
            "due": self.progress.get_due_for_review(),
            "streak": self.progress.get_streak(),
            "recent": self.progress.get_recent_activity(10),
            "by_difficulty": self.progress.get_counts_by_difficulty(),
            "by_category": self.progress.get_counts_by_category(catalog) if catalog is not None else {},
        }

    def _generate_report_content(self, stats: dict, target_date: date) -> str:
        """Generate markdown report content."""
        lines = []
        lines.append(f"# Practice Report ({iso_date(target_date)})")
        lines.append("")
        lines.append("## Overview")
        lines.append(f"- Problems solved: {len(stats['solved'])}")
        lines.append(f"- Total solves: {sum(p.review_count for p in stats['solved'])}")
        lines.append(f"- Due for review: {len(stats['due'])}")
        lines.append(f"- Current streak: {stats['streak']} day(s)")
        lines.append("")

        if stats["due"]:
            lines.append("## Due for Review")
            for p in stats["due"][:10]:
                lines.append(
                    f"- {p.item_id} ({p.difficulty.value}, confidence {p.confidence}) "
                    f"{format_overdue(stats['now'], p.next_review_at)}"
                )
            if len(stats["due"]) > 10:
                lines.append(f"- ...and {len(stats['due']) - 10} more")
            lines.append("")

        if stats["recent"]:
            lines.append("## Recent Activity")
            for activity in stats["recent"]:
                lines.append(f"- {format_ts(activity.timestamp)} {activity.item.item_id}")
            lines.append("")

        lines.append("## By Difficulty")
        for difficulty, count in stats["by_difficulty"].items():
            lines.append(f"- {difficulty.value}: {count}")
        lines.append("")

        if stats["by_category"]:
            lines.append("## By Category")
            lines.append("| Category | Solved | Total |")
            lines.append("|---|---|---|")
            for category, counts in sorted(stats["by_category"].items()):
                lines.append(f"| {category} | {counts.solved} | {counts.total} |")
            lines.append("")

        lines.append("## Suggestions")
        suggestions = []
        if len(stats["due"]) > 10:
            suggestions.append("Many reviews are due, clear them before starting new problems")
        elif stats["due"]:
            suggestions.append(f"Review {len(stats['due'])} due problem(s) today")
        if stats["solved"] and stats["streak"] == 0:
            suggestions.append("Your streak has lapsed, solve one problem to restart it")
        if not suggestions:
            suggestions.append("Keep up the practice rhythm")
        for s in suggestions:
            lines.append(f"- {s}")

        return "\n".join(lines) + "\n"

    def _report_path(self, target_date: date) -> Path:
        return self.reports_dir / f"{iso_date(target_date)}.md"

    def generate(self, target_date: Optional[date] = None,
                 catalog: Optional[Iterable[CatalogItem]] = None, force: bool = False) -> str:
        """Generate the practice report for a date.

        Args:
            target_date: Date the report is filed under, defaults to today (UTC)
            catalog: Optional catalog for the per-category table
            force: Force regenerate if exists

        Returns:
            Path to the generated report file
        """
        if target_date is None:
            target_date = day_of(self.progress.clock())

        filepath = self._report_path(target_date)
        if filepath.exists() and not force:
            logger.info("Report %s already exists", filepath)
            return str(filepath)

        stats = self._collect_stats(catalog)
        content = self._generate_report_content(stats, target_date)

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        filepath.write_text(content, encoding="utf-8")
        return str(filepath)
