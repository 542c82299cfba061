"""Shared Typer app object, shared option types, and store utility."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..io.workout_store import WorkoutStore, get_default_scores_path, get_default_workouts_path
from . import views

# Shared path options used across commands
WorkoutsOption = Annotated[
    Optional[Path],
    typer.Option("--workouts", "-w", help="Path to workouts JSON file"),
]
ScoresOption = Annotated[
    Optional[Path],
    typer.Option("--scores", "-s", help="Path to scores JSONL file"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="wodkit",
    help="Search workouts, grade scores and import score history.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    wodkit: workout search, performance levels and score import.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
        force=True,
    )


def get_store(workouts_path: Path | None, scores_path: Path | None = None) -> WorkoutStore:
    """Get a store from paths or the default locations."""
    if workouts_path is None:
        workouts_path = get_default_workouts_path()
    if scores_path is None:
        scores_path = get_default_scores_path()
    return WorkoutStore(workouts_path, scores_path)
