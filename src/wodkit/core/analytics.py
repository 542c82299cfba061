"""
Corpus and history aggregates.

- movement frequency per category (and flat, over any workout list)
- tag/category counts for completed workouts
- monthly performance trend with a trailing rolling average
"""

import logging
from collections import defaultdict
from typing import Iterable, Mapping, Sequence

from .config import ROLLING_WINDOW, UNLEVELED_TREND_VALUE
from .levels import adjusted_level, difficulty_multiplier, level_value, performance_level
from .models import MonthlyPerformance, MonthlyScoreDetail, MovementFrequency, Score, Workout
from .movements import workout_movements

logger = logging.getLogger(__name__)


def _count_movements(workouts: Iterable[Workout]) -> dict[str, MovementFrequency]:
    counts: dict[str, int] = defaultdict(int)
    names: dict[str, list[str]] = defaultdict(list)
    for workout in workouts:
        # Each workout counts once per movement, however often it is mentioned
        for movement in set(workout_movements(workout)):
            counts[movement] += 1
            names[movement].append(workout.name)
    return {m: MovementFrequency(counts[m], tuple(names[m])) for m in counts}


def movement_counts(workouts: Iterable[Workout]) -> dict[str, MovementFrequency]:
    """
    Count how many workouts use each movement.

    Args:
        workouts: Workouts to scan

    Returns:
        Canonical movement name -> MovementFrequency
    """
    return _count_movements(workouts)


def aggregate_movement_frequency(
    workouts: Iterable[Workout],
) -> dict[str, dict[str, MovementFrequency]]:
    """
    Movement frequency grouped by workout category.

    Workouts without a category are skipped.

    Args:
        workouts: Corpus snapshot

    Returns:
        category -> movement -> MovementFrequency
    """
    by_category: dict[str, list[Workout]] = defaultdict(list)
    for workout in workouts:
        if workout.category:
            by_category[workout.category].append(workout)
    return {category: _count_movements(ws) for category, ws in by_category.items()}


def top_movements(
    frequency: Mapping[str, MovementFrequency],
    limit: int | None = None,
) -> list[tuple[str, MovementFrequency]]:
    """Return movements ordered by count (desc), then name."""
    ranked = sorted(frequency.items(), key=lambda item: (-item[1].count, item[0]))
    return ranked[:limit] if limit is not None else ranked


def tag_and_category_counts(
    workouts: Iterable[Workout],
    scores_by_workout: Mapping[str, Sequence[Score]],
) -> tuple[dict[str, int], dict[str, int]]:
    """
    Count tags and categories over completed workouts.

    A workout is completed when it has at least one logged score.

    Returns:
        (tag counts, category counts)
    """
    tag_counts: dict[str, int] = defaultdict(int)
    category_counts: dict[str, int] = defaultdict(int)
    for workout in workouts:
        if not scores_by_workout.get(workout.id):
            continue
        if workout.category:
            category_counts[workout.category] += 1
        for tag in workout.tags:
            tag_counts[tag] += 1
    return dict(tag_counts), dict(category_counts)


def rolling_average(values: Sequence[float], window: int = ROLLING_WINDOW) -> list[float]:
    """
    Trailing rolling mean.

    Each point averages itself and up to ``window - 1`` earlier points;
    the first points use the shorter history instead of zero padding.

    rolling_average([1, 2, 3], window=2) -> [1.0, 1.5, 2.5]
    """
    if window < 1:
        raise ValueError("window must be >= 1")

    result: list[float] = []
    for i in range(len(values)):
        chunk = values[max(0, i - window + 1): i + 1]
        result.append(sum(chunk) / len(chunk))
    return result


def monthly_performance(
    entries: Iterable[tuple[Workout, Score]],
    window: int = ROLLING_WINDOW,
) -> list[MonthlyPerformance]:
    """
    Build the monthly performance trend.

    Each score contributes its adjusted level (a score without a level
    counts as beginner). Scores for workouts without benchmarks are
    skipped.

    Args:
        entries: (workout, score) pairs, any order
        window: Rolling average window in months with data

    Returns:
        One MonthlyPerformance per month with data, in month order
    """
    months: dict[str, MonthlyPerformance] = {}

    for workout, score in entries:
        if workout.benchmarks is None:
            logger.warning(
                "Skipping score %s: workout %r has no benchmarks", score.id, workout.name
            )
            continue

        level = level_value(performance_level(workout, score))
        if level is None:
            level = UNLEVELED_TREND_VALUE

        adjusted = adjusted_level(level, score.is_rx, workout.difficulty)
        key = score.score_date.strftime("%Y-%m")
        month = months.setdefault(key, MonthlyPerformance(month=key))
        month.count += 1
        month.total_adjusted_level += adjusted
        month.scores.append(
            MonthlyScoreDetail(
                workout_name=workout.name,
                level=level,
                is_rx=score.is_rx,
                difficulty=workout.difficulty,
                difficulty_multiplier=difficulty_multiplier(workout.difficulty),
                adjusted_level=adjusted,
                score_date=score.score_date,
            )
        )

    ordered = [months[k] for k in sorted(months)]
    for month, avg in zip(ordered, rolling_average([m.average_level for m in ordered], window)):
        month.rolling_average = avg
    return ordered
