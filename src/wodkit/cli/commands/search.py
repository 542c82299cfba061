"""Search commands: search, movements."""

import json
from typing import Annotated, Optional

import typer

from ...core.analytics import aggregate_movement_frequency, top_movements
from ...core.search import search_workouts
from ...io.serializers import ValidationError
from .. import views
from ..app import JsonOption, WorkoutsOption, app, get_store


def _load_workouts(workouts_path):
    store = get_store(workouts_path)
    try:
        return store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help='Search query; wrap in quotes for an exact phrase, e.g. \'"squat clean"\'')],
    workouts_path: WorkoutsOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show at most N results"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Search workouts by name, description, movements and tags.
    """
    workouts = _load_workouts(workouts_path)
    results = search_workouts(workouts, query)
    if limit is not None:
        results = results[:limit]

    if json_out:
        print(json.dumps([
            {
                "id": r.workout.id,
                "name": r.workout.name,
                "score": round(r.score, 2),
                "matches": None if r.matches is None else [
                    {
                        "key": m.key,
                        "value": m.value,
                        "indices": [list(span) for span in m.indices],
                        "ref_index": m.ref_index,
                    }
                    for m in r.matches
                ],
            }
            for r in results
        ], indent=2))
        return

    if not results:
        views.print_info(f"No workouts match {query!r}.")
        return

    views.console.print(views.format_search_table(results, query))


@app.command()
def movements(
    workouts_path: WorkoutsOption = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only show this category"),
    ] = None,
    top: Annotated[
        Optional[int],
        typer.Option("--top", "-t", help="Show the N most frequent movements per category"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show how often each movement appears, per workout category.
    """
    workouts = _load_workouts(workouts_path)
    by_category = aggregate_movement_frequency(workouts)

    if category is not None:
        if category not in by_category:
            views.print_error(f"Unknown category: {category}. Known: {', '.join(sorted(by_category)) or 'none'}")
            raise typer.Exit(1)
        by_category = {category: by_category[category]}

    if json_out:
        print(json.dumps({
            cat: {
                movement: {"count": freq.count, "workout_names": list(freq.workout_names)}
                for movement, freq in top_movements(table, top)
            }
            for cat, table in sorted(by_category.items())
        }, indent=2))
        return

    if not by_category:
        views.print_info("No categorized workouts found.")
        return

    for cat, table in sorted(by_category.items()):
        views.console.print(views.format_movement_table(cat, table, top))
