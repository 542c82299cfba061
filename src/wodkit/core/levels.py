"""
Performance levels.

A score is graded against its workout's benchmark bands:

    time (lower is better):   <= elite.max -> elite, <= advanced.max -> advanced,
                              <= intermediate.max -> intermediate, else beginner
    reps/load/rounds:         >= elite.min -> elite, ... , else beginner

Rounds scores fold partial reps into the decimal part (5 rounds + 12 reps
-> 5.12) so they compare on one axis.

The adjusted level used for trends rewards Rx and harder workouts:

    adjusted = min(level + 0.5, 4) * difficulty_multiplier   (Rx, level < 4)
    adjusted = level * difficulty_multiplier                 (otherwise)
"""

from datetime import date
from functools import cmp_to_key
from typing import Literal, Mapping, Sequence

from .config import (
    DEFAULT_DIFFICULTY_MULTIPLIER,
    DIFFICULTY_MULTIPLIERS,
    DIFFICULTY_SORT_VALUES,
    LEVEL_VALUES,
    MAX_LEVEL_VALUE,
    MAX_PARTIAL_REPS,
    ORDINAL_NO_SCORE,
    ORDINAL_RX_UNLEVELED,
    ORDINAL_SCALED,
    RX_BONUS,
)
from .models import BenchmarkSpec, LevelName, Score, Workout

SortKey = Literal["name", "results", "date", "difficulty", "likes"]
SortDirection = Literal["asc", "desc"]

_DIFFICULTY_MULTIPLIERS_LOWER = {k.lower(): v for k, v in DIFFICULTY_MULTIPLIERS.items()}


def has_score(score: Score) -> bool:
    """True if any primary value (time, reps, load, rounds) is recorded."""
    return any(
        v is not None
        for v in (score.time_seconds, score.reps, score.load, score.rounds_completed)
    )


def rounds_value(rounds_completed: int, partial_reps: int | None) -> float:
    """
    Fold partial reps into a rounds score.

    rounds_value(5, 12) -> 5.12; partial reps above 99 are clamped.
    """
    partial = min(partial_reps or 0, MAX_PARTIAL_REPS)
    return rounds_completed + partial / 100


def numeric_score(workout: Workout, score: Score) -> float | None:
    """
    Return the score value on the workout's benchmark axis.

    Args:
        workout: Workout with a BenchmarkSpec
        score: Logged score

    Returns:
        Comparable value, or None if the workout has no benchmarks or the
        score lacks the field its benchmark type needs
    """
    spec = workout.benchmarks
    if spec is None or not spec.has_levels():
        return None

    if spec.type == "time":
        return float(score.time_seconds) if score.time_seconds is not None else None
    if spec.type == "reps":
        return float(score.reps) if score.reps is not None else None
    if spec.type == "load":
        return float(score.load) if score.load is not None else None
    if spec.type == "rounds":
        if score.rounds_completed is None:
            return None
        return rounds_value(score.rounds_completed, score.partial_reps)
    return None


def level_for_value(spec: BenchmarkSpec, value: float) -> LevelName:
    """
    Grade a numeric value against benchmark bands.

    Elite, advanced and intermediate are tested in order; bands that are
    missing or have no bound on the relevant side are skipped. Anything
    that fails those tests is beginner.
    """
    for level in ("elite", "advanced", "intermediate"):
        band = spec.band(level)
        if band is None:
            continue
        if spec.lower_is_better:
            if band.max is not None and value <= band.max:
                return level
        elif band.min is not None and value >= band.min:
            return level
    return "beginner"


def performance_level(workout: Workout, score: Score) -> LevelName | None:
    """
    Return the discrete performance level of a score.

    Args:
        workout: Workout being scored
        score: Logged score

    Returns:
        "elite", "advanced", "intermediate", "beginner", or None when the
        score cannot be graded
    """
    value = numeric_score(workout, score)
    if value is None:
        return None
    return level_for_value(workout.benchmarks, value)


def level_value(level: str | None) -> int | None:
    """Map a level name to 4..1 (None for no level)."""
    if level is None:
        return None
    return LEVEL_VALUES.get(level)


def latest_score(scores: Sequence[Score]) -> Score | None:
    """Return the most recent score by date (first wins on ties)."""
    latest: Score | None = None
    for score in scores:
        if latest is None or score.score_date > latest.score_date:
            latest = score
    return latest


def results_ordinal(workout: Workout, scores: Sequence[Score]) -> int:
    """
    Sort ordinal for the results column.

    elite 4, advanced 3, intermediate 2, beginner 1, Rx without a level 0,
    scaled -1, no score -2. Only the most recent score counts.
    """
    latest = latest_score(scores)
    if latest is None:
        return ORDINAL_NO_SCORE
    if not latest.is_rx:
        return ORDINAL_SCALED
    value = level_value(performance_level(workout, latest))
    return value if value is not None else ORDINAL_RX_UNLEVELED


def difficulty_multiplier(difficulty: str | None) -> float:
    """Trend weight for a difficulty label (1.0 when unknown or missing)."""
    if not difficulty:
        return DEFAULT_DIFFICULTY_MULTIPLIER
    return _DIFFICULTY_MULTIPLIERS_LOWER.get(
        difficulty.strip().lower(), DEFAULT_DIFFICULTY_MULTIPLIER
    )


def adjusted_level(level: float, is_rx: bool, difficulty: str | None) -> float:
    """
    Apply the Rx bonus and difficulty weight to a level value.

    adjusted_level(2, True, "Hard") -> 3.0

    Args:
        level: Level value (1-4)
        is_rx: Whether the score was performed as prescribed
        difficulty: Workout difficulty label

    Returns:
        Adjusted level
    """
    base = float(level)
    if is_rx and base < MAX_LEVEL_VALUE:
        base = min(base + RX_BONUS, float(MAX_LEVEL_VALUE))
    return base * difficulty_multiplier(difficulty)


# =============================================================================
# Sorting
# =============================================================================


def _compare_names(a: Workout, b: Workout) -> int:
    ka = (a.name.casefold(), a.name)
    kb = (b.name.casefold(), b.name)
    return (ka > kb) - (ka < kb)


def _sign(x: float) -> int:
    return (x > 0) - (x < 0)


def sort_workouts(
    workouts: Sequence[Workout],
    sort_by: SortKey,
    direction: SortDirection = "asc",
    scores_by_workout: Mapping[str, Sequence[Score]] | None = None,
) -> list[Workout]:
    """
    Sort workouts for a table view.

    Ties on the primary key fall back to name order (always ascending).
    Workouts without scores sort last by date when ascending.

    Args:
        workouts: Workouts to sort (not modified)
        sort_by: "name", "results", "date", "difficulty" or "likes"
        direction: "asc" or "desc"
        scores_by_workout: Scores keyed by workout id

    Returns:
        New sorted list
    """
    if sort_by not in ("name", "results", "date", "difficulty", "likes"):
        raise ValueError(f"Unknown sort key: {sort_by}")

    sign = 1 if direction == "asc" else -1
    scores_by_workout = scores_by_workout or {}

    def latest_date(w: Workout) -> date | None:
        latest = latest_score(scores_by_workout.get(w.id, ()))
        return latest.score_date if latest is not None else None

    def compare(a: Workout, b: Workout) -> int:
        if sort_by == "name":
            return _compare_names(a, b) * sign

        if sort_by == "results":
            va = results_ordinal(a, scores_by_workout.get(a.id, ()))
            vb = results_ordinal(b, scores_by_workout.get(b.id, ()))
        elif sort_by == "date":
            da, db = latest_date(a), latest_date(b)
            if da is None and db is None:
                return _compare_names(a, b)
            if da is None:
                return sign
            if db is None:
                return -sign
            va, vb = da.toordinal(), db.toordinal()
        elif sort_by == "difficulty":
            va = DIFFICULTY_SORT_VALUES.get((a.difficulty or "").lower(), 0)
            vb = DIFFICULTY_SORT_VALUES.get((b.difficulty or "").lower(), 0)
        else:
            va, vb = a.count_likes or 0, b.count_likes or 0

        if va != vb:
            return _sign(va - vb) * sign
        return _compare_names(a, b)

    return sorted(workouts, key=cmp_to_key(compare))
