"""
Data models for wodkit.

All core dataclasses representing workouts, benchmarks, scores, search
results and CSV import rows. Models are frozen: the workout corpus and
score records are read-only snapshots for the duration of an operation.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, Union

from .config import BENCHMARK_TYPES

BenchmarkType = Literal["time", "reps", "load", "rounds"]
LevelName = Literal["elite", "advanced", "intermediate", "beginner"]
CsvSchema = Literal["legacy", "native"]


@dataclass(frozen=True)
class BenchmarkBand:
    """One threshold band of a benchmark. ``None`` means unbounded."""

    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class BenchmarkSpec:
    """
    Per-workout table of four threshold bands.

    For ``time`` lower is better and bands are read by ``max``; for
    reps/load/rounds higher is better and bands are read by ``min``.
    """

    type: BenchmarkType
    elite: BenchmarkBand | None = None
    advanced: BenchmarkBand | None = None
    intermediate: BenchmarkBand | None = None
    beginner: BenchmarkBand | None = None

    def __post_init__(self) -> None:
        if self.type not in BENCHMARK_TYPES:
            raise ValueError(f"Invalid benchmark type: {self.type}")

    @property
    def lower_is_better(self) -> bool:
        return self.type == "time"

    def band(self, level: str) -> BenchmarkBand | None:
        """Return the band for a level name, or None if undefined."""
        return getattr(self, level, None)

    def has_levels(self) -> bool:
        """True if at least one band is defined."""
        return any(
            b is not None for b in (self.elite, self.advanced, self.intermediate, self.beginner)
        )


@dataclass(frozen=True)
class Workout:
    """
    A named workout (WOD) from the corpus.

    ``movements`` holds stored movement names when the data source provides
    them; when empty, the movement set is derived from ``description``.
    """

    id: str
    name: str
    description: str = ""
    tags: tuple[str, ...] = ()
    category: str | None = None
    difficulty: str | None = None
    benchmarks: BenchmarkSpec | None = None
    movements: tuple[str, ...] = ()
    count_likes: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class Score:
    """
    A logged result for one workout.

    At most one value group is expected to be populated, matching the
    workout's benchmark type: ``time_seconds``, ``reps``, ``load`` or
    (``rounds_completed``, ``partial_reps``).
    """

    id: str
    workout_id: str
    score_date: date
    is_rx: bool = False
    time_seconds: float | None = None
    reps: int | None = None
    load: float | None = None
    rounds_completed: int | None = None
    partial_reps: int | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate score values."""
        for name in ("time_seconds", "reps", "load", "rounds_completed", "partial_reps"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative")


class MovementKind(str, Enum):
    """Whether a canonical name came from the alias table or was synthesized."""

    KNOWN = "known"
    SYNTHESIZED = "synthesized"


@dataclass(frozen=True)
class CanonicalMovement:
    """A normalized movement name tagged with its provenance."""

    name: str
    kind: MovementKind

    @property
    def is_synthesized(self) -> bool:
        return self.kind is MovementKind.SYNTHESIZED


@dataclass(frozen=True)
class MovementFrequency:
    """How many workouts use a movement, and which ones."""

    count: int = 0
    workout_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchLocation:
    """
    Where a fuzzy search hit inside one field.

    ``indices`` are half-open ``(start, end)`` character spans into ``value``.
    ``ref_index`` is the element position for list fields (movements, tags)
    and None for scalar fields.
    """

    key: str
    value: str
    indices: tuple[tuple[int, int], ...]
    ref_index: int | None = None


@dataclass(frozen=True)
class SearchResult:
    """
    One workout returned by a search.

    ``matches`` is None for exact and multi-token searches, which do not
    report match locations.
    """

    workout: Workout
    matches: tuple[MatchLocation, ...] | None = None
    score: float = 100.0


# =============================================================================
# CSV import
# =============================================================================


@dataclass(frozen=True)
class LegacyCsvRow:
    """A row from the third-party export (``title``, ``score_type``, MM/DD/YYYY dates)."""

    date: str
    title: str
    best_result_raw: str = ""
    score_type: str = ""
    rx_or_scaled: str = ""
    description: str = ""
    best_result_display: str = ""
    notes: str = ""
    schema: Literal["legacy"] = field(default="legacy", init=False)


@dataclass(frozen=True)
class NativeCsvRow:
    """A row from this system's own export (one column per score field)."""

    wod_name: str
    date: str
    score_time: str = ""
    score_reps: str = ""
    score_rounds: str = ""
    score_partial_reps: str = ""
    score_load: str = ""
    rx: str = ""
    notes: str = ""
    schema: Literal["native"] = field(default="native", init=False)


CsvImportRow = Union[LegacyCsvRow, NativeCsvRow]


@dataclass(frozen=True)
class ProposedScore:
    """A score synthesized from an import row, pending user confirmation."""

    workout_id: str
    score_date: date
    is_rx: bool = False
    time_seconds: float | None = None
    reps: int | None = None
    load: float | None = None
    rounds_completed: int | None = None
    partial_reps: int | None = None
    notes: str | None = None

    def has_value(self) -> bool:
        """True if any primary score field is set (partial reps alone do not count)."""
        return any(
            v is not None
            for v in (self.time_seconds, self.reps, self.load, self.rounds_completed)
        )

    def to_score(self, score_id: str) -> Score:
        """Convert to a persisted Score with the given id."""
        return Score(
            id=score_id,
            workout_id=self.workout_id,
            score_date=self.score_date,
            is_rx=self.is_rx,
            time_seconds=self.time_seconds,
            reps=self.reps,
            load=self.load,
            rounds_completed=self.rounds_completed,
            partial_reps=self.partial_reps,
            notes=self.notes,
        )


@dataclass(frozen=True)
class RowValidation:
    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessedRow:
    """An import row after workout matching, date parsing and validation."""

    id: str
    csv_row: CsvImportRow
    matched_workout: Workout | None
    validation: RowValidation
    proposed_score: ProposedScore | None
    selected: bool


# =============================================================================
# Trends
# =============================================================================


@dataclass(frozen=True)
class MonthlyScoreDetail:
    """How a single score contributed to its month's trend value."""

    workout_name: str
    level: int
    is_rx: bool
    difficulty: str | None
    difficulty_multiplier: float
    adjusted_level: float
    score_date: date


@dataclass
class MonthlyPerformance:
    """Aggregated adjusted levels for one calendar month (``YYYY-MM``)."""

    month: str
    count: int = 0
    total_adjusted_level: float = 0.0
    scores: list[MonthlyScoreDetail] = field(default_factory=list)
    rolling_average: float | None = None

    @property
    def average_level(self) -> float:
        """Monthly trend value: mean adjusted level."""
        if self.count == 0:
            return 0.0
        return self.total_adjusted_level / self.count
