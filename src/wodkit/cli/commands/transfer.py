"""Import/export commands: import, export."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...core.importer import (
    CsvImportError,
    build_workout_index,
    detect_schema,
    native_row_for_score,
    process_rows,
    selected_scores,
)
from ...io.csv_files import read_csv_rows, write_native_csv
from ...io.serializers import ValidationError
from .. import views
from ..app import JsonOption, ScoresOption, WorkoutsOption, app, get_store


@app.command("import")
def import_scores(
    csv_path: Annotated[Path, typer.Argument(help="CSV file (legacy or native export)")],
    workouts_path: WorkoutsOption = None,
    scores_path: ScoresOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Review rows without saving"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Save without asking for confirmation"),
    ] = False,
    json_out: JsonOption = False,
) -> None:
    """
    Import scores from a CSV export.
    """
    store = get_store(workouts_path, scores_path)
    try:
        workouts = store.load_workouts()
        headers, rows = read_csv_rows(csv_path)
        schema = detect_schema(headers)
        processed = process_rows(rows, build_workout_index(workouts), schema)
    except (FileNotFoundError, ValidationError, CsvImportError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    to_save = selected_scores(processed)

    if json_out:
        print(json.dumps({
            "schema": schema,
            "rows": [
                {
                    "id": r.id,
                    "workout": r.matched_workout.name if r.matched_workout else None,
                    "valid": r.validation.is_valid,
                    "selected": r.selected,
                    "errors": list(r.validation.errors),
                }
                for r in processed
            ],
        }, indent=2))
    else:
        views.console.print(views.format_import_table(processed))
        views.print_info(
            f"{schema} export: {len(processed)} rows, {len(to_save)} ready to import, "
            f"{len(processed) - len(to_save)} skipped."
        )

    if dry_run or not to_save:
        return

    if not yes and not views.confirm_action(f"Import {len(to_save)} scores?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    saved = store.save_proposed(to_save)
    if not json_out:
        views.print_success(f"Imported {len(saved)} scores into {store.scores_path}")


@app.command("export")
def export_scores(
    csv_path: Annotated[Path, typer.Argument(help="Destination CSV file")],
    workouts_path: WorkoutsOption = None,
    scores_path: ScoresOption = None,
) -> None:
    """
    Export logged scores as CSV (re-importable with 'import').
    """
    store = get_store(workouts_path, scores_path)
    try:
        workouts = {w.id: w for w in store.load_workouts()}
        scores = store.load_scores()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    rows = []
    skipped = 0
    for score in scores:
        workout = workouts.get(score.workout_id)
        if workout is None:
            skipped += 1
            continue
        rows.append(native_row_for_score(workout, score))

    written = write_native_csv(csv_path, rows)
    if skipped:
        views.print_warning(f"Skipped {skipped} scores for unknown workouts")
    views.print_success(f"Exported {written} scores to {csv_path}")
