"""
JSON serialization for workouts and scores.

Handles conversion between dataclasses and JSON-compatible dicts. Workout
records accept both snake_case keys and the camelCase keys used by
exported workout collections (``wodName``, ``countLikes``, ``wodUrl``).
"""

import json
import re
from datetime import date, datetime
from typing import Any

from ..core.config import LEVEL_NAMES
from ..core.models import BenchmarkBand, BenchmarkSpec, Score, Workout


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> date:
    """
    Validate an ISO date string.

    Args:
        date_str: Date string (YYYY-MM-DD)

    Returns:
        Parsed date

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e


def parse_tags(tags: Any) -> tuple[str, ...]:
    """
    Normalize a tags value to a tuple of strings.

    Accepts a list or a JSON-encoded list string; anything else (including
    unparseable JSON) yields an empty tuple.
    """
    if isinstance(tags, (list, tuple)):
        return tuple(str(t) for t in tags)
    if isinstance(tags, str):
        try:
            parsed = json.loads(tags)
        except json.JSONDecodeError:
            return ()
        if isinstance(parsed, list):
            return tuple(str(t) for t in parsed)
    return ()


def _optional_number(value: Any, name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    return float(value)


def dict_to_benchmarks(data: dict | None) -> BenchmarkSpec | None:
    """
    Convert ``{"type": ..., "levels": {level: {"min", "max"}}}`` to a BenchmarkSpec.

    Raises:
        ValidationError: If the type or a bound is invalid
    """
    if not data:
        return None
    if not isinstance(data, dict):
        raise ValidationError(f"benchmarks must be an object, got {data!r}")

    levels = data.get("levels") or {}
    if not isinstance(levels, dict):
        raise ValidationError("benchmarks.levels must be an object")

    bands: dict[str, BenchmarkBand | None] = {}
    for level in LEVEL_NAMES:
        raw = levels.get(level)
        if raw is None:
            bands[level] = None
            continue
        if not isinstance(raw, dict):
            raise ValidationError(f"benchmarks.levels.{level} must be an object, got {raw!r}")
        bands[level] = BenchmarkBand(
            min=_optional_number(raw.get("min"), f"{level}.min"),
            max=_optional_number(raw.get("max"), f"{level}.max"),
        )

    try:
        return BenchmarkSpec(type=data.get("type"), **bands)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def benchmarks_to_dict(spec: BenchmarkSpec | None) -> dict | None:
    """Convert a BenchmarkSpec to its JSON form."""
    if spec is None:
        return None
    levels = {}
    for level in LEVEL_NAMES:
        band = spec.band(level)
        if band is not None:
            levels[level] = {"min": band.min, "max": band.max}
    return {"type": spec.type, "levels": levels}


def dict_to_workout(data: dict) -> Workout:
    """
    Convert dict to Workout.

    Args:
        data: Workout record from the corpus file

    Returns:
        Workout instance

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    name = data.get("name", data.get("wodName"))
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Workout record has no name: {data!r}")

    workout_id = data.get("id")
    if workout_id is None:
        raise ValidationError(f"Workout {name!r} has no id")

    movements = data.get("movements") or []
    if not isinstance(movements, list):
        raise ValidationError(f"movements must be a list for workout {name!r}")

    likes = data.get("count_likes", data.get("countLikes"))
    if likes is not None:
        try:
            likes = int(likes)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"countLikes must be an integer for workout {name!r}, got {likes!r}") from e

    return Workout(
        id=str(workout_id),
        name=name,
        description=data.get("description") or "",
        tags=parse_tags(data.get("tags")),
        category=data.get("category"),
        difficulty=data.get("difficulty"),
        benchmarks=dict_to_benchmarks(data.get("benchmarks")),
        movements=tuple(str(m) for m in movements),
        count_likes=likes,
        url=data.get("url", data.get("wodUrl")),
    )


def workout_to_dict(workout: Workout) -> dict:
    """Convert Workout to a JSON-compatible dict."""
    result: dict[str, Any] = {
        "id": workout.id,
        "name": workout.name,
        "description": workout.description,
        "tags": list(workout.tags),
        "category": workout.category,
        "difficulty": workout.difficulty,
        "benchmarks": benchmarks_to_dict(workout.benchmarks),
    }
    if workout.movements:
        result["movements"] = list(workout.movements)
    if workout.count_likes is not None:
        result["count_likes"] = workout.count_likes
    if workout.url:
        result["url"] = workout.url
    return result


def dict_to_score(data: dict) -> Score:
    """
    Convert dict to Score.

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    for key in ("id", "workout_id", "score_date"):
        if key not in data:
            raise ValidationError(f"Score record missing '{key}': {data!r}")

    def optional_int(key: str) -> int | None:
        value = data.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{key} must be an integer, got {value!r}")
        return value

    try:
        return Score(
            id=str(data["id"]),
            workout_id=str(data["workout_id"]),
            score_date=validate_date(data["score_date"]),
            is_rx=bool(data.get("is_rx", False)),
            time_seconds=_optional_number(data.get("time_seconds"), "time_seconds"),
            reps=optional_int("reps"),
            load=_optional_number(data.get("load"), "load"),
            rounds_completed=optional_int("rounds_completed"),
            partial_reps=optional_int("partial_reps"),
            notes=data.get("notes"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def score_to_dict(score: Score) -> dict:
    """Convert Score to a JSON-compatible dict (empty fields omitted)."""
    result: dict[str, Any] = {
        "id": score.id,
        "workout_id": score.workout_id,
        "score_date": score.score_date.isoformat(),
        "is_rx": score.is_rx,
    }
    for key in ("time_seconds", "reps", "load", "rounds_completed", "partial_reps", "notes"):
        value = getattr(score, key)
        if value is not None:
            result[key] = value
    return result


def score_to_json_line(score: Score) -> str:
    """Serialize a score to a single JSON line."""
    return json.dumps(score_to_dict(score), separators=(",", ":"))
