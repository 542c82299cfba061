"""
Display formatting for scores, benchmark ranges and level badges.

Pure string helpers; colors are Rich style names so the CLI can use them
directly.
"""

from .config import BADGE_COLORS, LEVEL_COLORS, LEVEL_NAMES
from .levels import performance_level
from .models import Score, Workout

INFINITY = "∞"


def _num(value: float) -> str:
    """Render 225.0 as "225" and 7.5 as "7.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def format_seconds_mmss(seconds: float | None) -> str:
    """
    Format seconds as M:SS.

    format_seconds_mmss(185) -> "3:05"; negative or missing -> "0:00"
    """
    if seconds is None or seconds != seconds or seconds < 0:
        return "0:00"
    minutes, remaining = divmod(int(seconds), 60)
    return f"{minutes}:{remaining:02d}"


def format_seconds_min_sec(seconds: float | None) -> str:
    """
    Format seconds as "Xmin Ysec".

    2124 -> "35min 24sec", 24 -> "24sec", 60 -> "1min 0sec"
    """
    if seconds is None or seconds != seconds or seconds < 0:
        return "0sec"
    minutes, remaining = divmod(int(seconds), 60)
    if minutes > 0:
        return f"{minutes}min {remaining}sec"
    return f"{remaining}sec"


def format_score(score: Score, suffix: str | None = None) -> str:
    """
    Format the populated value of a score.

    Time as M:SS, reps as "N reps", load as "N lbs", rounds as "R+P" or
    "R rounds". An optional suffix (e.g. "Rx") is appended.
    """
    if score.time_seconds is not None:
        value = format_seconds_mmss(score.time_seconds)
    elif score.reps is not None:
        value = f"{score.reps} reps"
    elif score.load is not None:
        value = f"{_num(score.load)} lbs"
    elif score.rounds_completed is not None:
        if score.partial_reps:
            value = f"{score.rounds_completed}+{score.partial_reps}"
        else:
            value = f"{score.rounds_completed} rounds"
    else:
        value = "-"
    return f"{value} {suffix}" if suffix else value


def level_color(level: str | None) -> str:
    """Rich style for a level name."""
    return LEVEL_COLORS.get(level or "default", LEVEL_COLORS["default"])


def benchmark_ranges(workout: Workout | None) -> list[tuple[str, str, str]]:
    """
    Human-readable band ranges for each level.

    Args:
        workout: Workout with benchmarks

    Returns:
        ``(level label, style, range)`` in elite -> beginner order; empty
        when the workout has no bands. Undefined bands show "N/A".
    """
    if workout is None or workout.benchmarks is None or not workout.benchmarks.has_levels():
        return []

    spec = workout.benchmarks
    unit = " lbs" if spec.type == "load" else ""
    rows: list[tuple[str, str, str]] = []

    for level in LEVEL_NAMES:
        label = level.capitalize()
        band = spec.band(level)
        if band is None:
            rows.append((label, level_color(level), "N/A"))
            continue

        if spec.type == "time":
            lo = format_seconds_mmss(band.min) if band.min is not None else "0:00"
            hi = format_seconds_mmss(band.max) if band.max is not None else INFINITY
            if level == "elite":
                text = f"0:00 - {hi}"
            else:
                text = f"{lo} - {hi}"
        else:
            lo = _num(band.min) if band.min is not None else "0"
            hi = _num(band.max) if band.max is not None else INFINITY
            if level == "elite" and band.max is None:
                text = f"> {lo}{unit}"
            else:
                text = f"{lo} - {hi}{unit}"

        rows.append((label, level_color(level), text))
    return rows


def performance_badge(workout: Workout, score: Score) -> tuple[str, str]:
    """
    Badge label and color for a score.

    Scaled scores always show "Scaled"; Rx scores show their level, or
    "Rx" when no level can be computed.

    Returns:
        (label, color)
    """
    if not score.is_rx:
        return "Scaled", "gray"

    level = performance_level(workout, score)
    if level is not None:
        return level.capitalize(), BADGE_COLORS[level]
    return "Rx", "green"
