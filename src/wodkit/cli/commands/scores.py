"""Score commands: level, trend."""

import json
import logging
import math
from datetime import date
from typing import Annotated, Optional

import typer

from ...core.analytics import monthly_performance
from ...core.formatting import performance_badge
from ...core.levels import numeric_score, performance_level
from ...core.models import Score, Workout
from ...io.serializers import ValidationError
from .. import views
from ..app import JsonOption, ScoresOption, WorkoutsOption, app, get_store

logger = logging.getLogger(__name__)


def parse_time(text: str) -> float:
    """
    Parse a time given as seconds ("185") or M:SS / H:MM:SS ("3:05").

    Raises:
        typer.BadParameter: If the value is not a valid time
    """
    parts = text.strip().split(":")
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise typer.BadParameter(f"Invalid time: {text!r}. Use seconds or M:SS")
    if len(values) > 3 or any(not math.isfinite(v) or v < 0 for v in values):
        raise typer.BadParameter(f"Invalid time: {text!r}. Use seconds or M:SS")
    total = 0.0
    for v in values:
        total = total * 60 + v
    return total


def parse_rounds(text: str) -> tuple[int, int | None]:
    """
    Parse a rounds score "R" or "R+P".

    Raises:
        typer.BadParameter: If the value is not a valid rounds score
    """
    parts = text.strip().split("+")
    try:
        rounds = int(parts[0])
        partial = int(parts[1]) if len(parts) > 1 else None
    except (ValueError, IndexError):
        raise typer.BadParameter(f"Invalid rounds: {text!r}. Use R or R+P")
    if len(parts) > 2 or rounds < 0 or (partial is not None and partial < 0):
        raise typer.BadParameter(f"Invalid rounds: {text!r}. Use R or R+P")
    return rounds, partial


def find_workout(workouts: list[Workout], name: str) -> Workout | None:
    """Find a workout by exact name, then case-insensitively."""
    for w in workouts:
        if w.name == name:
            return w
    lowered = name.strip().lower()
    for w in workouts:
        if w.name.lower() == lowered:
            return w
    return None


@app.command()
def level(
    name: Annotated[str, typer.Argument(help="Workout name, e.g. Fran")],
    workouts_path: WorkoutsOption = None,
    time: Annotated[
        Optional[str],
        typer.Option("--time", help="Time as seconds or M:SS"),
    ] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", min=0, help="Total reps"),
    ] = None,
    load: Annotated[
        Optional[float],
        typer.Option("--load", min=0, help="Load (lbs)"),
    ] = None,
    rounds: Annotated[
        Optional[str],
        typer.Option("--rounds", help="Rounds as R or R+P"),
    ] = None,
    rx: Annotated[
        bool,
        typer.Option("--rx/--scaled", help="Performed as prescribed"),
    ] = True,
    json_out: JsonOption = False,
) -> None:
    """
    Grade a score against a workout's benchmarks.
    """
    given = [v for v in (time, reps, load, rounds) if v is not None]
    if len(given) != 1:
        views.print_error("Give exactly one of --time, --reps, --load, --rounds")
        raise typer.Exit(1)
    if load is not None and not math.isfinite(load):
        raise typer.BadParameter(f"Invalid load: {load!r}", param_hint="--load")

    store = get_store(workouts_path)
    try:
        workouts = store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    workout = find_workout(workouts, name)
    if workout is None:
        views.print_error(f"No workout named {name!r}")
        raise typer.Exit(1)

    rounds_completed, partial_reps = parse_rounds(rounds) if rounds is not None else (None, None)
    score = Score(
        id="cli",
        workout_id=workout.id,
        score_date=date.today(),
        is_rx=rx,
        time_seconds=parse_time(time) if time is not None else None,
        reps=reps,
        load=load,
        rounds_completed=rounds_completed,
        partial_reps=partial_reps,
    )

    if json_out:
        label, color = performance_badge(workout, score)
        print(json.dumps({
            "workout": workout.name,
            "benchmark_type": workout.benchmarks.type if workout.benchmarks else None,
            "value": numeric_score(workout, score),
            "level": performance_level(workout, score),
            "badge": label,
            "color": color,
        }, indent=2))
        return

    views.print_level_result(workout, score)


@app.command()
def trend(
    workouts_path: WorkoutsOption = None,
    scores_path: ScoresOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show monthly performance with a rolling average.
    """
    store = get_store(workouts_path, scores_path)
    try:
        workouts = {w.id: w for w in store.load_workouts()}
        scores = store.load_scores()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    entries = []
    for score in scores:
        workout = workouts.get(score.workout_id)
        if workout is None:
            logger.warning("Score %s refers to unknown workout %s", score.id, score.workout_id)
            continue
        entries.append((workout, score))

    months = monthly_performance(entries)

    if json_out:
        print(json.dumps([
            {
                "month": m.month,
                "count": m.count,
                "average_level": round(m.average_level, 4),
                "rolling_average": round(m.rolling_average, 4) if m.rolling_average is not None else None,
            }
            for m in months
        ], indent=2))
        return

    if not months:
        views.print_info("No graded scores yet.")
        return

    views.console.print(views.format_trend_table(months))
