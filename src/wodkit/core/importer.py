"""
CSV import: resolve rows to workouts and synthesize proposed scores.

Two schemas are supported, told apart by their headers:

- legacy: third-party export (``date``, ``title``, ``best_result_raw``,
  ``score_type``, ``rx_or_scaled`` ...). Dates are MM/DD/YYYY; one raw value
  is interpreted according to ``score_type``; titles go through the import
  alias table before lookup.
- native: this tool's own export ("WOD Name", "Date", "Score (time)" ...).
  Dates are ISO-8601 (plus a few common formats); each score field has its
  own column.

Rows are never dropped. Problems are collected as error strings on the
row, which is then left unselected. CsvImportError is raised only when the
whole import cannot proceed.
"""

import re
from datetime import date, datetime
from typing import Iterable, Mapping, Sequence

from .aliases import IMPORT_ALIASES
from .config import (
    DEFAULT_LEGACY_SCORE_TYPE,
    LEGACY_REQUIRED_HEADERS,
    NATIVE_DATE_FORMATS,
    NATIVE_HEADERS,
    NATIVE_REQUIRED_HEADERS,
)
from .models import (
    CsvImportRow,
    CsvSchema,
    LegacyCsvRow,
    NativeCsvRow,
    ProcessedRow,
    ProposedScore,
    RowValidation,
    Score,
    Workout,
)

_LEADING_FLOAT_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")

ERROR_INVALID_DATE = "Invalid date format"
ERROR_MISSING_DATE = "Missing date"
ERROR_NO_LEGACY_SCORE = "No valid score value found based on score_type"
ERROR_NO_NATIVE_SCORE = "No valid score value found"
ERROR_NEGATIVE_SCORE = "Score values must be non-negative"


class CsvImportError(Exception):
    """Raised when a CSV import cannot proceed at all."""

    pass


# =============================================================================
# Lenient number parsing
# =============================================================================


def parse_float(text: str | None) -> float | None:
    """
    Parse the leading number of a string.

    parse_float("185") -> 185.0, parse_float("7.5 kg") -> 7.5,
    parse_float("abc") -> None
    """
    if not text:
        return None
    match = _LEADING_FLOAT_RE.match(text)
    return float(match.group(0)) if match else None


def parse_int(text: str | None) -> int | None:
    """Parse the leading integer of a string ("12 reps" -> 12)."""
    if not text:
        return None
    match = _LEADING_INT_RE.match(text)
    return int(match.group(0)) if match else None


# =============================================================================
# Schema detection and row parsing
# =============================================================================


def detect_schema(headers: Iterable[str]) -> CsvSchema:
    """
    Identify the CSV schema from its header row.

    Raises:
        CsvImportError: If the headers match neither schema
    """
    present = {h.strip() for h in headers if h}
    if NATIVE_REQUIRED_HEADERS <= present:
        return "native"
    if LEGACY_REQUIRED_HEADERS <= present:
        return "legacy"
    raise CsvImportError(
        "Unrecognized CSV headers. Expected either the native export columns "
        f"({', '.join(NATIVE_HEADERS)}) or the legacy export columns "
        f"({', '.join(sorted(LEGACY_REQUIRED_HEADERS))})."
    )


def parse_csv_row(raw: Mapping[str, str | None], schema: CsvSchema) -> CsvImportRow:
    """Build the typed row for a raw ``{header: cell}`` mapping."""

    def cell(key: str) -> str:
        value = raw.get(key)
        return value if value is not None else ""

    if schema == "legacy":
        return LegacyCsvRow(
            date=cell("date"),
            title=cell("title"),
            best_result_raw=cell("best_result_raw"),
            score_type=cell("score_type"),
            rx_or_scaled=cell("rx_or_scaled"),
            description=cell("description"),
            best_result_display=cell("best_result_display"),
            notes=cell("notes"),
        )
    if schema == "native":
        return NativeCsvRow(
            wod_name=cell("WOD Name"),
            date=cell("Date"),
            score_time=cell("Score (time)"),
            score_reps=cell("Score (reps)"),
            score_rounds=cell("Score (rounds)"),
            score_partial_reps=cell("Score (partial reps)"),
            score_load=cell("Score (load)"),
            rx=cell("Rx"),
            notes=cell("Notes"),
        )
    raise CsvImportError(f"Unknown CSV schema: {schema}")


def build_workout_index(workouts: Iterable[Workout]) -> dict[str, Workout]:
    """Name -> workout index (case-sensitive; later duplicates win)."""
    return {w.name: w for w in workouts}


# =============================================================================
# Dates
# =============================================================================


def parse_legacy_date(text: str) -> date | None:
    """
    Parse a MM/DD/YYYY date by splitting on "/".

    Returns None for anything that is not three numeric parts forming a
    real calendar date.
    """
    parts = text.strip().split("/")
    if len(parts) != 3 or not all(p.strip() for p in parts):
        return None
    month, day, year = (parse_int(p) for p in parts)
    if month is None or day is None or year is None:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_native_date(text: str) -> date | None:
    """Parse an ISO-8601 date or datetime, falling back to common formats."""
    value = text.strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in NATIVE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


# =============================================================================
# Row processing
# =============================================================================


def _unmatched_error(name: str) -> str:
    return f"No matching workout found for '{name}'"


def _finish_row(
    index: int,
    csv_row: CsvImportRow,
    workout: Workout | None,
    score_date: date | None,
    values: dict,
    is_rx: bool,
    notes: str | None,
    errors: list[str],
) -> ProcessedRow:
    proposed = None
    if workout is not None and score_date is not None and not _has_negative(values):
        candidate = ProposedScore(
            workout_id=workout.id,
            score_date=score_date,
            is_rx=is_rx,
            notes=notes,
            **values,
        )
        if candidate.has_value():
            proposed = candidate

    is_valid = not errors and workout is not None and proposed is not None
    return ProcessedRow(
        id=f"row-{index}",
        csv_row=csv_row,
        matched_workout=workout,
        validation=RowValidation(is_valid, tuple(errors)),
        proposed_score=proposed,
        selected=is_valid,
    )


def _has_any(values: dict) -> bool:
    return any(values[k] is not None for k in ("time_seconds", "reps", "load", "rounds_completed"))


def _has_negative(values: dict) -> bool:
    return any(v is not None and v < 0 for v in values.values())


def process_legacy_row(
    index: int,
    row: LegacyCsvRow,
    workouts_by_name: Mapping[str, Workout],
    aliases: Mapping[str, str] = IMPORT_ALIASES,
) -> ProcessedRow:
    """
    Resolve and validate one legacy-export row.

    Args:
        index: Position of the row in the file (used for the row id)
        row: Parsed legacy row
        workouts_by_name: Name -> workout index
        aliases: Imported title -> local workout name

    Returns:
        ProcessedRow with errors collected in input-field order
    """
    errors: list[str] = []

    title = row.title
    workout = workouts_by_name.get(aliases.get(title, title))
    if workout is None:
        errors.append(_unmatched_error(title))

    score_date = parse_legacy_date(row.date)
    if score_date is None:
        errors.append(ERROR_INVALID_DATE)

    score_type = row.score_type.lower() or DEFAULT_LEGACY_SCORE_TYPE
    raw = row.best_result_raw
    is_rounds = "rounds" in score_type
    rounds_parts = raw.split("+") if is_rounds else []
    values = {
        "time_seconds": parse_float(raw) if "time" in score_type else None,
        "reps": parse_int(raw) if "reps" in score_type else None,
        "load": parse_float(raw) if "load" in score_type else None,
        "rounds_completed": parse_int(rounds_parts[0]) if is_rounds else None,
        "partial_reps": parse_int(rounds_parts[1]) if len(rounds_parts) > 1 else None,
    }
    if not _has_any(values):
        errors.append(ERROR_NO_LEGACY_SCORE)
    if _has_negative(values):
        errors.append(ERROR_NEGATIVE_SCORE)

    is_rx = row.rx_or_scaled.strip().upper() == "RX"
    return _finish_row(index, row, workout, score_date, values, is_rx, row.notes or None, errors)


def process_native_row(
    index: int,
    row: NativeCsvRow,
    workouts_by_name: Mapping[str, Workout],
) -> ProcessedRow:
    """
    Resolve and validate one native-export row.

    Only non-empty score cells are parsed; time and load keep decimals,
    the count fields are integers.
    """
    errors: list[str] = []

    name = row.wod_name.strip()
    workout = workouts_by_name.get(name)
    if workout is None:
        errors.append(_unmatched_error(name))

    score_date = None
    if row.date.strip():
        score_date = parse_native_date(row.date)
        if score_date is None:
            errors.append(ERROR_INVALID_DATE)
    else:
        errors.append(ERROR_MISSING_DATE)

    values = {
        "time_seconds": parse_float(row.score_time),
        "reps": parse_int(row.score_reps),
        "load": parse_float(row.score_load),
        "rounds_completed": parse_int(row.score_rounds),
        "partial_reps": parse_int(row.score_partial_reps),
    }
    if not _has_any(values):
        errors.append(ERROR_NO_NATIVE_SCORE)
    if _has_negative(values):
        errors.append(ERROR_NEGATIVE_SCORE)

    is_rx = row.rx.strip().lower() == "yes"
    return _finish_row(index, row, workout, score_date, values, is_rx, row.notes or None, errors)


def process_rows(
    rows: Sequence[Mapping[str, str | None]],
    workouts_by_name: Mapping[str, Workout],
    schema: CsvSchema | None = None,
    headers: Iterable[str] | None = None,
) -> list[ProcessedRow]:
    """
    Process raw CSV rows in input order.

    Args:
        rows: Parsed ``{header: cell}`` mappings
        workouts_by_name: Name -> workout index (see build_workout_index)
        schema: Schema to use; detected from ``headers`` (or the first
            row's keys) when omitted

    Returns:
        One ProcessedRow per input row

    Raises:
        CsvImportError: If the workout index is empty or the schema cannot
            be determined
    """
    if not workouts_by_name:
        raise CsvImportError("Workout data not available for matching.")
    if not rows:
        return []

    if schema is None:
        schema = detect_schema(headers if headers is not None else rows[0].keys())

    processed: list[ProcessedRow] = []
    for index, raw in enumerate(rows):
        typed = parse_csv_row(raw, schema)
        if isinstance(typed, LegacyCsvRow):
            processed.append(process_legacy_row(index, typed, workouts_by_name))
        else:
            processed.append(process_native_row(index, typed, workouts_by_name))
    return processed


def selected_scores(rows: Iterable[ProcessedRow]) -> list[ProposedScore]:
    """Proposed scores of the rows that are valid and selected."""
    return [
        r.proposed_score
        for r in rows
        if r.selected and r.validation.is_valid and r.proposed_score is not None
    ]


# =============================================================================
# Export
# =============================================================================


def _cell(value: float | int | None) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def native_row_for_score(workout: Workout, score: Score) -> dict[str, str]:
    """
    Render a score as a native-schema CSV row.

    The result re-imports to the same score through process_native_row().
    """
    return {
        "WOD Name": workout.name,
        "Date": score.score_date.isoformat(),
        "Score (time)": _cell(score.time_seconds),
        "Score (reps)": _cell(score.reps),
        "Score (rounds)": _cell(score.rounds_completed),
        "Score (partial reps)": _cell(score.partial_reps),
        "Score (load)": _cell(score.load),
        "Rx": "yes" if score.is_rx else "no",
        "Notes": score.notes or "",
    }
