"""
Movement name normalization and extraction.

normalize_movement_name() maps a raw variant ("Pull-Ups", "kb swings") to a
canonical name through the alias table. extract_movements() scans a
workout description for capitalized phrases and resolves each one.

Extraction is heuristic (regex + stopwords): any capitalized phrase that
survives the filters and is not in the alias table becomes a synthesized
canonical name.
"""

import re
from functools import lru_cache
from typing import Mapping

from .aliases import MOVEMENT_ALIASES
from .config import (
    CAPITALIZED_RUN_PATTERN,
    INTRODUCTORY_WORDS,
    MIN_MOVEMENT_LENGTH,
    PARENTHETICAL_PATTERN,
    STOPWORDS,
    TRAILING_PUNCTUATION_PATTERN,
    UNIT_TOKEN_PATTERN,
)
from .models import CanonicalMovement, MovementKind, Workout

_CAPITALIZED_RUN_RE = re.compile(CAPITALIZED_RUN_PATTERN)
_PARENTHETICAL_RE = re.compile(PARENTHETICAL_PATTERN)
_UNIT_TOKEN_RE = re.compile(UNIT_TOKEN_PATTERN, re.IGNORECASE)
_TRAILING_PUNCTUATION_RE = re.compile(TRAILING_PUNCTUATION_PATTERN)


def _title_case(cleaned: str) -> str:
    # Only the first letter of each word changes; "pull-up" -> "Pull-up"
    return " ".join(word[:1].upper() + word[1:] for word in cleaned.split(" "))


def resolve_movement(
    raw: str | None,
    aliases: Mapping[str, str] = MOVEMENT_ALIASES,
) -> CanonicalMovement | None:
    """
    Resolve a raw movement phrase to a tagged canonical name.

    Lookup order:
    1. trimmed, lowercased phrase in the alias table
    2. the same with one trailing "s" removed
    3. title-cased phrase (SYNTHESIZED) if longer than 2 characters

    Args:
        raw: Raw phrase as found in text
        aliases: Variant -> canonical table (lowercase keys)

    Returns:
        CanonicalMovement, or None for empty/too-short input
    """
    if not raw or not isinstance(raw, str):
        return None

    cleaned = raw.strip().lower()

    if cleaned in aliases:
        return CanonicalMovement(aliases[cleaned], MovementKind.KNOWN)

    if cleaned.endswith("s"):
        singular = cleaned[:-1]
        if singular in aliases:
            return CanonicalMovement(aliases[singular], MovementKind.KNOWN)

    if len(cleaned) > MIN_MOVEMENT_LENGTH:
        return CanonicalMovement(_title_case(cleaned), MovementKind.SYNTHESIZED)

    return None


def normalize_movement_name(
    raw: str | None,
    aliases: Mapping[str, str] = MOVEMENT_ALIASES,
) -> str | None:
    """
    Normalize a raw movement phrase to its canonical name.

    normalize_movement_name(" Pull-Ups ") -> "Pull-Up"
    normalize_movement_name("dumbbell snatches") -> "Dumbbell Snatch"
    normalize_movement_name("Sandbag Carry") -> "Sandbag Carry"  (synthesized)
    normalize_movement_name("xy") -> None
    """
    resolved = resolve_movement(raw, aliases)
    return resolved.name if resolved is not None else None


def clean_phrase(phrase: str) -> str:
    """
    Strip annotations from a candidate phrase.

    Removes parenthetical notes ("(95/65 lb)"), number+unit tokens
    ("24 in", "1.5 pood") and one trailing ':', '-', '.' or ','.
    """
    phrase = _PARENTHETICAL_RE.sub("", phrase)
    phrase = _UNIT_TOKEN_RE.sub("", phrase)
    phrase = _TRAILING_PUNCTUATION_RE.sub("", phrase.rstrip())
    return phrase.strip()


def is_movement_phrase(phrase: str) -> bool:
    """
    Decide whether a cleaned phrase looks like a movement.

    Rejected: phrases of length <= 2, stopword phrases, phrases made only of
    stopwords and single letters, and sentence fragments starting with an
    introductory word ("If completed", "Rest between").
    """
    if len(phrase) <= MIN_MOVEMENT_LENGTH:
        return False

    lowered = phrase.lower()
    if lowered in STOPWORDS:
        return False

    words = lowered.split()
    if not words:
        return False
    if all(word in STOPWORDS or len(word) <= 1 for word in words):
        return False
    if words[0] in INTRODUCTORY_WORDS:
        return False
    return True


def candidate_phrases(line: str) -> list[str]:
    """Return the cleaned movement-like phrases found on one line."""
    phrases: list[str] = []
    for match in _CAPITALIZED_RUN_RE.finditer(line):
        phrase = clean_phrase(match.group(0))
        if is_movement_phrase(phrase):
            phrases.append(phrase)
    return phrases


@lru_cache(maxsize=4096)
def movements_from_text(description: str) -> frozenset[str]:
    """
    Extract the canonical movement set from free text.

    Cached per description; alias tables are immutable so the result
    cannot go stale.
    """
    movements: set[str] = set()
    for line in description.split("\n"):
        for phrase in candidate_phrases(line):
            name = normalize_movement_name(phrase)
            if name:
                movements.add(name)
    return frozenset(movements)


def extract_movements(workout: Workout) -> frozenset[str]:
    """
    Derive a workout's movement set from its description.

    A workout missing its name, category or description yields an empty
    set. Repeated mentions collapse: "Thrusters, Thrusters, Pull-Ups"
    gives {"Thruster", "Pull-Up"}.

    Args:
        workout: Workout to scan

    Returns:
        Set of canonical movement names
    """
    if not workout.name or not workout.category or not workout.description:
        return frozenset()
    return movements_from_text(workout.description)


def workout_movements(workout: Workout) -> tuple[str, ...]:
    """
    Return the movements used for searching a workout.

    Stored movements are normalized (falling back to the stored text);
    otherwise the set derived from the description is used, sorted.
    """
    if workout.movements:
        return tuple(normalize_movement_name(m) or m for m in workout.movements)
    return tuple(sorted(extract_movements(workout)))
