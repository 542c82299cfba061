"""
Configuration constants for the wodkit core.

All tunable parameters are centralized here: search thresholds, the
movement-phrase filters, level values and the trend weighting.
Alias tables are data, not constants; they live in ``data/aliases/*.yaml``
and are loaded by ``core.aliases``.
"""

from typing import Final

# =============================================================================
# SEARCH
# =============================================================================

# Thresholds on a 0..1 distance scale (0 = identical); similarity cutoff
# on rapidfuzz's 0..100 scale is (1 - threshold) * 100.
SEARCH_THRESHOLD_SINGLE: Final[float] = 0.2  # single unquoted token (strict)
SEARCH_THRESHOLD_MULTI: Final[float] = 0.3   # per token of a multi-token query

SEARCH_FIELDS: Final[tuple[str, ...]] = ("name", "description", "movements", "tags")
EXACT_SEARCH_FIELDS: Final[tuple[str, ...]] = ("name", "description", "movements")


def similarity_cutoff(threshold: float) -> float:
    """
    Convert a distance threshold into a rapidfuzz similarity cutoff.

    Args:
        threshold: Distance threshold in [0, 1]

    Returns:
        Minimum similarity score in [0, 100]
    """
    return max(0.0, min(100.0, (1.0 - threshold) * 100.0))


# =============================================================================
# MOVEMENT EXTRACTION
# =============================================================================

# Minimum cleaned length (exclusive) for a phrase to count as a movement
MIN_MOVEMENT_LENGTH: Final[int] = 2

CAPITALIZED_RUN_PATTERN: Final[str] = r"[A-Z][a-zA-Z\s-]+"
PARENTHETICAL_PATTERN: Final[str] = r"\s*\(.*?\)"
UNIT_TOKEN_PATTERN: Final[str] = r"(\d+(\.\d+)?/?\d*(\.\d+)?)\s*(lb|kg|pood|in|meter|meters)\b"
TRAILING_PUNCTUATION_PATTERN: Final[str] = r"[:\-.,]$"

# Words and phrases that are workout prose rather than movements.
STOPWORDS: Final[frozenset[str]] = frozenset(
    {
        "for", "time", "reps", "rounds", "of", "min", "rest", "between",
        "then", "amrap", "emom", "in", "minutes", "seconds", "with", "meter",
        "meters", "lb", "kg", "pood", "bodyweight", "alternating", "legs",
        "unbroken", "max", "needed", "set", "score", "is", "load", "the",
        "a", "and", "or", "each", "total", "cap", "as", "many", "possible",
        "on", "every", "minute", "from", "if", "completed", "before",
        "rounds for time", "reps for time", "rep for time", "for time",
        "amrap in", "emom in", "time cap", "with a", "minute rest",
        "rest between rounds", "alternating legs", "over the bar",
        "bar facing", "dumbbell", "kettlebell", "barbell", "assault bike",
        "echo bike", "cals", "calories", "men", "women", "men use",
        "women use", "amanda", "doubles and oly", "ringer",
        "if you complete", "complete", "perform", "then rest",
        "each round", "round", "part",
    }
)

# A phrase starting with one of these is a sentence fragment
# ("If completed before...", "Rest between rounds...").
INTRODUCTORY_WORDS: Final[frozenset[str]] = frozenset(
    {"if", "for", "then", "rest", "each", "complete", "perform", "round", "rounds"}
)

# =============================================================================
# PERFORMANCE LEVELS
# =============================================================================

BENCHMARK_TYPES: Final[tuple[str, ...]] = ("time", "reps", "load", "rounds")
LEVEL_NAMES: Final[tuple[str, ...]] = ("elite", "advanced", "intermediate", "beginner")

LEVEL_VALUES: Final[dict[str, int]] = {
    "elite": 4,
    "advanced": 3,
    "intermediate": 2,
    "beginner": 1,
}
MAX_LEVEL_VALUE: Final[int] = 4
UNLEVELED_TREND_VALUE: Final[int] = 1  # level used in trends when no band resolves

# Table sort ordinal (distinct from the 0-4 level scale)
ORDINAL_RX_UNLEVELED: Final[int] = 0
ORDINAL_SCALED: Final[int] = -1
ORDINAL_NO_SCORE: Final[int] = -2

# Partial reps are folded into the decimal part of a rounds score
MAX_PARTIAL_REPS: Final[int] = 99

# =============================================================================
# TREND WEIGHTING
# =============================================================================

RX_BONUS: Final[float] = 0.5

DIFFICULTY_MULTIPLIERS: Final[dict[str, float]] = {
    "Easy": 0.8,
    "Medium": 1.0,
    "Hard": 1.2,
    "Very Hard": 1.5,
    "Extremely Hard": 2.0,
}
DEFAULT_DIFFICULTY_MULTIPLIER: Final[float] = 1.0

# Ordering used by the difficulty sort column
DIFFICULTY_SORT_VALUES: Final[dict[str, int]] = {
    "easy": 1,
    "medium": 2,
    "hard": 3,
    "very hard": 4,
    "extremely hard": 5,
}

ROLLING_WINDOW: Final[int] = 12

# =============================================================================
# DISPLAY
# =============================================================================

LEVEL_COLORS: Final[dict[str, str]] = {
    "elite": "magenta",
    "advanced": "green",
    "intermediate": "yellow",
    "beginner": "red",
    "default": "dim",
}

BADGE_COLORS: Final[dict[str, str]] = {
    "elite": "purple",
    "advanced": "green",
    "intermediate": "yellow",
    "beginner": "gray",
}

# =============================================================================
# CSV IMPORT
# =============================================================================

LEGACY_REQUIRED_HEADERS: Final[frozenset[str]] = frozenset(
    {"date", "title", "best_result_raw", "rx_or_scaled"}
)
NATIVE_REQUIRED_HEADERS: Final[frozenset[str]] = frozenset({"WOD Name", "Date"})

NATIVE_HEADERS: Final[tuple[str, ...]] = (
    "WOD Name",
    "Date",
    "Score (time)",
    "Score (reps)",
    "Score (rounds)",
    "Score (partial reps)",
    "Score (load)",
    "Rx",
    "Notes",
)

DEFAULT_LEGACY_SCORE_TYPE: Final[str] = "time"

# Accepted by the native schema after ISO-8601 parsing fails
NATIVE_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)
