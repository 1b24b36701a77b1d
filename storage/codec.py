"""JSON codec for ProgressState.

The persisted blob uses camelCase keys:

    {
      "items": {"<id>": {"itemId", "solvedAt", "difficulty", "timeSpent"?,
                         "confidence", "nextReviewAt", "reviewCount"}},
      "lastActivityDate": "YYYY-MM-DD",
      "streakCount": 0
    }

Blobs written by the browser build ("problems" / "problemId") are accepted too.
"""
import json
import math
from typing import Any

from core import Difficulty, ProblemProgress, ProgressState


class MalformedStateError(ValueError):
    """Persisted progress data failed validation."""


def _require_int(raw: dict, key: str) -> int:
    value = raw.get(key)
    # bool is an int subclass but never a valid count or timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedStateError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise MalformedStateError(f"{key} must be an integer, got {value!r}")
    return int(value)


def _require_number(raw: dict, key: str):
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedStateError(f"{key} must be a finite number, got {value!r}")
    return value


def progress_to_dict(progress: ProblemProgress) -> dict[str, Any]:
    data: dict[str, Any] = {
        "itemId": progress.item_id,
        "solvedAt": list(progress.solved_at),
        "difficulty": progress.difficulty.value,
        "confidence": progress.confidence,
        "nextReviewAt": progress.next_review_at,
        "reviewCount": progress.review_count,
    }
    if progress.time_spent is not None:
        data["timeSpent"] = progress.time_spent
    return data


def progress_from_dict(key: str, raw: Any) -> ProblemProgress:
    if not isinstance(raw, dict):
        raise MalformedStateError(f"record {key!r} is not an object")

    item_id = raw.get("itemId", raw.get("problemId"))
    if item_id != key:
        raise MalformedStateError(f"record {key!r} has mismatched id {item_id!r}")

    solved_at = raw.get("solvedAt")
    if not isinstance(solved_at, list) or not solved_at:
        raise MalformedStateError(f"record {key!r} has no solve timestamps")
    timestamps = tuple(_require_int({"solvedAt": ts}, "solvedAt") for ts in solved_at)

    review_count = _require_int(raw, "reviewCount")
    if review_count != len(timestamps):
        raise MalformedStateError(
            f"record {key!r} reviewCount {review_count} != {len(timestamps)} solves"
        )

    try:
        difficulty = Difficulty(raw.get("difficulty"))
    except ValueError as e:
        raise MalformedStateError(str(e)) from e

    time_spent = raw.get("timeSpent")
    if time_spent is not None:
        time_spent = _require_number(raw, "timeSpent")

    return ProblemProgress(
        item_id=key,
        solved_at=timestamps,
        difficulty=difficulty,
        confidence=_require_number(raw, "confidence"),
        next_review_at=_require_int(raw, "nextReviewAt"),
        review_count=review_count,
        time_spent=time_spent,
    )


def state_to_dict(state: ProgressState) -> dict[str, Any]:
    return {
        "items": {key: progress_to_dict(p) for key, p in state.items.items()},
        "lastActivityDate": state.last_activity_date,
        "streakCount": state.streak_count,
    }


def state_from_dict(raw: Any) -> ProgressState:
    """Build a ProgressState from decoded JSON, validating every field."""
    if not isinstance(raw, dict):
        raise MalformedStateError("progress state is not an object")

    items_raw = raw.get("items", raw.get("problems", {}))
    if not isinstance(items_raw, dict):
        raise MalformedStateError("items is not an object")
    items = {str(k): progress_from_dict(str(k), v) for k, v in items_raw.items()}

    last_activity_date = raw.get("lastActivityDate", "")
    if not isinstance(last_activity_date, str):
        raise MalformedStateError("lastActivityDate is not a string")

    streak_count = _require_int({"streakCount": raw.get("streakCount", 0)}, "streakCount")
    if streak_count < 0:
        raise MalformedStateError("streakCount is negative")

    return ProgressState(
        items=items,
        last_activity_date=last_activity_date,
        streak_count=streak_count,
    )


def dumps(state: ProgressState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False)


def loads(text: str) -> ProgressState:
    try:
        raw = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedStateError(f"invalid JSON: {e}") from e
    return state_from_dict(raw)
