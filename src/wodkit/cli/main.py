"""
CLI entry point using Typer.

Provides commands for the workout corpus and score history:
- search: Fuzzy/exact workout search
- movements: Movement frequency per category
- level: Grade a score against benchmarks
- trend: Monthly performance trend
- import: Import scores from a CSV export
- export: Export scores as CSV
"""

from .app import app
from .commands import scores, search, transfer  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
