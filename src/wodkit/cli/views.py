"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, levels, trends and
import review.
"""

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.aliases import canonical_movement_names
from ..core.analytics import top_movements
from ..core.formatting import benchmark_ranges, format_score, level_color, performance_badge
from ..core.levels import numeric_score, performance_level
from ..core.models import (
    LegacyCsvRow,
    MonthlyPerformance,
    MovementFrequency,
    ProcessedRow,
    Score,
    SearchResult,
    Workout,
)
from ..core.movements import workout_movements
from ..core.search import exact_phrase, find_match_spans, is_exact_query

console = Console()
err_console = Console(stderr=True)

HIGHLIGHT_STYLE = "bold yellow"


def highlighted(text: str, spans: Sequence[tuple[int, int]]) -> Text:
    """Return a Rich Text with the given spans styled as matches."""
    result = Text(text)
    for start, end in spans:
        result.stylize(HIGHLIGHT_STYLE, start, end)
    return result


def _highlight_terms(query: str) -> str | list[str]:
    # Exact queries highlight the phrase; others highlight each token
    if is_exact_query(query):
        phrase = exact_phrase(query)
        return [phrase] if phrase.strip() else []
    return query.split()


def _field_spans(result: SearchResult, key: str, value: str, query: str, ref_index: int | None = None):
    if result.matches is not None:
        spans: list[tuple[int, int]] = []
        for m in result.matches:
            if m.key == key and m.ref_index == ref_index:
                spans.extend(m.indices)
        return spans
    return find_match_spans(value, _highlight_terms(query))


def format_search_table(results: list[SearchResult], query: str) -> Table:
    """
    Create a Rich table of search results with matches highlighted.

    Args:
        results: Search results in rank order
        query: Raw query (used to highlight results without match spans)

    Returns:
        Rich Table object
    """
    table = Table(title=f"Workouts matching {query!r}")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Workout", style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Movements")
    table.add_column("Tags", style="magenta")

    for i, result in enumerate(results, 1):
        workout = result.workout
        name = highlighted(workout.name, _field_spans(result, "name", workout.name, query))

        movements = Text()
        for j, movement in enumerate(workout_movements(workout)):
            if j:
                movements.append(", ")
            movements.append_text(
                highlighted(movement, _field_spans(result, "movements", movement, query, j))
            )

        tags = Text()
        for j, tag in enumerate(workout.tags):
            if j:
                tags.append(", ")
            tags.append_text(highlighted(tag, _field_spans(result, "tags", tag, query, j)))

        table.add_row(str(i), name, workout.category or "-", movements, tags)

    return table


def format_movement_table(
    category: str,
    frequency: dict[str, MovementFrequency],
    top: int | None = None,
) -> Table:
    """
    Create a Rich table of movement frequency for one category.

    Movements not in the alias table (synthesized names) are shown dimmed.
    """
    table = Table(title=f"{category} movements")

    table.add_column("Movement", style="bold")
    table.add_column("Workouts", justify="right", style="cyan")
    table.add_column("Examples", style="dim")

    known = canonical_movement_names()
    for movement, freq in top_movements(frequency, top):
        label = movement if movement in known else f"[dim italic]{movement}[/dim italic]"
        examples = ", ".join(freq.workout_names[:3])
        if len(freq.workout_names) > 3:
            examples += ", ..."
        table.add_row(label, str(freq.count), examples)

    return table


def print_level_result(workout: Workout, score: Score) -> None:
    """Print the badge, level and benchmark ranges for a graded score."""
    label, color = performance_badge(workout, score)
    level = performance_level(workout, score)
    value = numeric_score(workout, score)

    console.print()
    console.print(f"[bold]{workout.name}[/bold]: {format_score(score)}")
    console.print(f"Badge: [{level_color(level)}]{label}[/{level_color(level)}] ({color})")
    if value is None:
        console.print("[dim]No benchmark level for this score.[/dim]")

    ranges = benchmark_ranges(workout)
    if not ranges:
        return

    table = Table(title="Benchmarks")
    table.add_column("Level")
    table.add_column("Range", justify="right")
    for name, style, text in ranges:
        marker = " <" if level is not None and name.lower() == level else ""
        table.add_row(f"[{style}]{name}[/{style}]", text + marker)
    console.print(table)


def format_trend_table(months: list[MonthlyPerformance]) -> Table:
    """Create a Rich table of monthly performance."""
    table = Table(title="Performance Trend")

    table.add_column("Month", style="cyan")
    table.add_column("Scores", justify="right")
    table.add_column("Avg level", justify="right", style="bold")
    table.add_column("Rolling avg", justify="right", style="green")

    for month in months:
        rolling = f"{month.rolling_average:.2f}" if month.rolling_average is not None else "-"
        table.add_row(month.month, str(month.count), f"{month.average_level:.2f}", rolling)

    return table


def _row_title(row: ProcessedRow) -> str:
    csv_row = row.csv_row
    return csv_row.title if isinstance(csv_row, LegacyCsvRow) else csv_row.wod_name


def format_import_table(rows: list[ProcessedRow]) -> Table:
    """Create a Rich review table of processed import rows."""
    table = Table(title="Import Review")

    table.add_column("Row", style="dim")
    table.add_column("Sel", justify="center")
    table.add_column("Title")
    table.add_column("Workout", style="cyan")
    table.add_column("Date")
    table.add_column("Score", justify="right")
    table.add_column("Errors", style="red")

    for row in rows:
        proposed = row.proposed_score
        score_text = "-"
        if proposed is not None:
            score_text = format_score(proposed.to_score(row.id), "Rx" if proposed.is_rx else None)
        table.add_row(
            row.id,
            "[green]x[/green]" if row.selected else "",
            _row_title(row),
            row.matched_workout.name if row.matched_workout else "-",
            proposed.score_date.isoformat() if proposed else row.csv_row.date,
            score_text,
            "; ".join(row.validation.errors),
        )

    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
