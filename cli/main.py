#!/usr/bin/env python3
"""AlgoForge CLI - Command line interface for practice progress."""
import argparse
import csv
import datetime as dt
import json
import logging
from pathlib import Path
from typing import Optional

from core import CatalogItem, Difficulty
from core.config import Settings, load_config
from services.progress_service import ProgressScheduler
from services.report_service import ReportService, format_ts
from storage import SQLiteProgressStore, connect


def _parse_catalog_file(path: Path) -> list[CatalogItem]:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() == ".jsonl":
        rows = []
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    rows.append(json.loads(line))
    elif path.suffix.lower() == ".json":
        rows = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            raise ValueError("JSON file must be a list of objects.")
    elif path.suffix.lower() == ".csv":
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            rows = list(csv.DictReader(f))
    else:
        raise ValueError("Unsupported format. Use .jsonl, .json, or .csv")

    catalog = []
    for row in rows:
        item_id = str(row.get("id") or "").strip()
        if not item_id:
            continue
        catalog.append(CatalogItem(item_id=item_id, category=str(row.get("category") or "Uncategorized")))
    return catalog


def _describe(progress) -> str:
    time_spent = f" time={progress.time_spent:g}s" if progress.time_spent is not None else ""
    return (
        f"{progress.item_id} [{progress.difficulty.value}] reps={progress.review_count} "
        f"confidence={progress.confidence}{time_spent} (due {format_ts(progress.next_review_at)})"
    )


def solve(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    result = progress.mark_solved(args.item, args.difficulty, args.confidence, args.time)
    print(f"Recorded solve #{result.review_count} of {result.item_id}, "
          f"next review {format_ts(result.next_review_at)}")


def show(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    result = progress.get_progress(args.item)
    if result is None:
        print(f"No progress for {args.item}.")
        return
    print(_describe(result))


def due(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    items = progress.get_due_for_review()
    if not items:
        print("Nothing due for review.")
        return
    for p in items[:args.limit]:
        print(_describe(p))


def streak(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    count = progress.get_streak()
    print(f"Current streak: {count} day(s)")


def recent(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    activities = progress.get_recent_activity(args.limit)
    if not activities:
        print("No activity yet.")
        return
    for activity in activities:
        print(f"{format_ts(activity.timestamp)}  {activity.item.item_id}")


def stats(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    print("By difficulty:")
    for difficulty, count in progress.get_counts_by_difficulty().items():
        print(f"  {difficulty.value}: {count}")

    if args.catalog:
        catalog = _parse_catalog_file(Path(args.catalog))
        print("By category:")
        for category, counts in sorted(progress.get_counts_by_category(catalog).items()):
            print(f"  {category}: {counts.solved}/{counts.total}")


def reset(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    if not args.yes:
        print("Refusing to reset without --yes.")
        return
    progress.reset_all()
    print("All progress cleared.")


def generate_report(progress: ProgressScheduler, args: argparse.Namespace) -> None:
    target_date = None
    if args.date:
        target_date = dt.datetime.strptime(args.date, "%Y-%m-%d").date()
    catalog = _parse_catalog_file(Path(args.catalog)) if args.catalog else None

    service = ReportService(progress, args.settings.reports_dir)
    filepath = service.generate(target_date=target_date, catalog=catalog, force=args.force)
    print(f"Report generated: {filepath}")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AlgoForge: spaced-repetition practice tracker.")
    parser.add_argument("--db", default=str(settings.db_path), help="SQLite database path.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="Record a solved problem.")
    p_solve.add_argument("item", help="Problem id.")
    p_solve.add_argument("--difficulty", required=True, choices=[d.value for d in Difficulty])
    p_solve.add_argument("--confidence", type=int, required=True, help="Self-rated confidence 1-5.")
    p_solve.add_argument("--time", type=float, default=None, help="Time spent in seconds.")
    p_solve.set_defaults(func=solve)

    p_show = sub.add_parser("show", help="Show progress of one problem.")
    p_show.add_argument("item", help="Problem id.")
    p_show.set_defaults(func=show)

    p_due = sub.add_parser("due", help="List problems due for review.")
    p_due.add_argument("--limit", type=int, default=20, help="Max items.")
    p_due.set_defaults(func=due)

    p_streak = sub.add_parser("streak", help="Show the current daily streak.")
    p_streak.set_defaults(func=streak)

    p_recent = sub.add_parser("recent", help="Show recent solves.")
    p_recent.add_argument("--limit", type=int, default=10, help="Max events.")
    p_recent.set_defaults(func=recent)

    p_stats = sub.add_parser("stats", help="Show solved counts.")
    p_stats.add_argument("--catalog", default="", help="Catalog file (json/jsonl/csv with id, category).")
    p_stats.set_defaults(func=stats)

    p_reset = sub.add_parser("reset", help="Clear all progress.")
    p_reset.add_argument("--yes", action="store_true", help="Confirm the reset.")
    p_reset.set_defaults(func=reset)

    p_report = sub.add_parser("report", help="Generate a practice report.")
    p_report.add_argument("--date", default="", help="Report date (YYYY-MM-DD), defaults to today.")
    p_report.add_argument("--catalog", default="", help="Catalog file for the category table.")
    p_report.add_argument("--force", action="store_true", help="Force regenerate if exists.")
    p_report.set_defaults(func=generate_report)

    return parser


def main(argv: Optional[list[str]] = None, settings: Optional[Settings] = None) -> None:
    settings = settings or load_config()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    args.settings = settings
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    conn = connect(Path(args.db))
    try:
        store = SQLiteProgressStore(conn, key=settings.storage_key)
        progress = ProgressScheduler(store)
        args.func(progress, args)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
