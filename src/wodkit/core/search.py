"""
Workout search.

Query shapes:
- ``"squat clean"`` (quoted): exact, case-insensitive substring search over
  name, description and movements. No fuzziness, no token splitting.
- ``thruster`` (single token): fuzzy search over name, description,
  movements and tags with a strict threshold; results carry match spans.
- ``thruster pullup`` (several tokens): one fuzzy search per token with a
  looser threshold, intersected (AND). Results carry no match spans;
  use find_match_spans() for highlighting.

A blank query matches nothing. Callers handle the "no filter" state
before searching.

create_search_pattern() is the single pattern builder used by both
check_workout_match() style filtering and highlighting, so what is
reported as matched is exactly what gets highlighted.
"""

import logging
import re
from typing import Sequence

from rapidfuzz import fuzz

from .config import (
    EXACT_SEARCH_FIELDS,
    SEARCH_FIELDS,
    SEARCH_THRESHOLD_MULTI,
    SEARCH_THRESHOLD_SINGLE,
    similarity_cutoff,
)
from .models import MatchLocation, SearchResult, Workout
from .movements import workout_movements

logger = logging.getLogger(__name__)

Span = tuple[int, int]


# ---------------------------------------------------------------------------
# Query parsing
# ---------------------------------------------------------------------------


def is_exact_query(query: str) -> bool:
    """True if the trimmed query is wrapped in double quotes."""
    trimmed = query.strip()
    return bool(trimmed) and trimmed.startswith('"') and trimmed.endswith('"')


def exact_phrase(query: str) -> str:
    """Return the lowercased phrase inside a quoted query ("" if empty)."""
    trimmed = query.strip()
    if len(trimmed) < 2:
        return ""
    return trimmed[1:-1].lower()


def query_terms(query: str) -> list[str]:
    """Split an unquoted query into lowercase whitespace-separated terms."""
    return [term.lower() for term in query.split()]


# ---------------------------------------------------------------------------
# Pattern building and highlighting
# ---------------------------------------------------------------------------


def create_search_pattern(
    search_terms: str | Sequence[str],
    use_word_boundaries: bool = False,
) -> str:
    """
    Build the regex pattern shared by filtering and highlighting.

    A quoted string becomes one escaped phrase; anything else becomes an
    alternation of escaped terms.

    Args:
        search_terms: Raw query string or list of terms
        use_word_boundaries: Wrap each term (or the phrase) in \\b

    Returns:
        Pattern string, or "" when there is nothing to match
    """
    if isinstance(search_terms, str) and len(search_terms.strip()) > 1 and is_exact_query(search_terms):
        phrase = search_terms.strip()[1:-1]
        if not phrase.strip():
            return ""
        escaped = re.escape(phrase)
        return rf"\b{escaped}\b" if use_word_boundaries else escaped

    if isinstance(search_terms, str):
        terms = search_terms.split()
    else:
        terms = [t for t in search_terms if t]

    if not terms:
        return ""

    escaped_terms = [re.escape(term) for term in terms]
    if use_word_boundaries:
        return "|".join(rf"\b{term}\b" for term in escaped_terms)
    return "|".join(escaped_terms)


def _compile_pattern(query: str | Sequence[str], use_word_boundaries: bool) -> re.Pattern | None:
    pattern = create_search_pattern(query, use_word_boundaries)
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning("Cannot highlight query %r: %s", query, exc)
        return None


def find_match_spans(
    text: str,
    query: str | Sequence[str],
    use_word_boundaries: bool = False,
) -> list[Span]:
    """
    Re-scan text for the query's literal terms.

    Used to highlight multi-token results, which carry no match locations.
    A pattern that fails to compile yields no spans.
    """
    if not text:
        return []
    compiled = _compile_pattern(query, use_word_boundaries)
    if compiled is None:
        return []
    return [m.span() for m in compiled.finditer(text) if m.end() > m.start()]


def highlight_segments(
    text: str,
    query: str | Sequence[str],
    use_word_boundaries: bool = False,
) -> list[tuple[str, bool]]:
    """
    Split text into ``(segment, is_match)`` pairs for display.

    Args:
        text: Text to highlight
        query: Raw query or list of terms

    Returns:
        Segments covering the whole text, in order
    """
    if not text:
        return []
    spans = find_match_spans(text, query, use_word_boundaries)
    if not spans:
        return [(text, False)]

    segments: list[tuple[str, bool]] = []
    pos = 0
    for start, end in spans:
        if start > pos:
            segments.append((text[pos:start], False))
        segments.append((text[start:end], True))
        pos = end
    if pos < len(text):
        segments.append((text[pos:], False))
    return segments


# ---------------------------------------------------------------------------
# Literal matching
# ---------------------------------------------------------------------------


def _literal_fields(workout: Workout, include_tags: bool = True) -> list[str]:
    fields = [workout.name.lower(), (workout.description or "").lower()]
    if include_tags:
        fields.extend(tag.lower() for tag in workout.tags)
    fields.extend(m.lower() for m in workout_movements(workout))
    return fields


def workout_matches_all_terms(workout: Workout, search_terms: Sequence[str]) -> bool:
    """
    Literal AND match.

    Every term must be a case-insensitive substring of the name, the
    description, a tag or a movement. An empty term list matches nothing.
    """
    terms = [t.lower() for t in search_terms if t]
    if not terms:
        return False
    fields = _literal_fields(workout)
    return all(any(term in f for f in fields) for term in terms)


def check_workout_match(workout: Workout, query: str) -> bool:
    """
    Non-fuzzy match of one workout against a raw query.

    Quoted queries need the whole phrase in one field (tags included);
    multi-token queries use workout_matches_all_terms(); a single token is
    a substring test over the same fields.
    """
    trimmed = query.strip()
    if not trimmed:
        return False

    if is_exact_query(trimmed):
        phrase = exact_phrase(trimmed)
        if not phrase.strip():
            return False
        return any(phrase in f for f in _literal_fields(workout))

    terms = query_terms(trimmed)
    if not terms:
        return False
    return workout_matches_all_terms(workout, terms)


# ---------------------------------------------------------------------------
# Exact and fuzzy search
# ---------------------------------------------------------------------------


def _field_values(workout: Workout, key: str) -> list[tuple[str, int | None]]:
    """Return ``(value, ref_index)`` pairs for a searchable field."""
    if key == "name":
        return [(workout.name, None)]
    if key == "description":
        return [(workout.description or "", None)]
    if key == "movements":
        return [(m, i) for i, m in enumerate(workout_movements(workout))]
    if key == "tags":
        return [(t, i) for i, t in enumerate(workout.tags)]
    raise ValueError(f"Unknown search field: {key}")


def _literal_spans(haystack: str, needle: str) -> tuple[Span, ...]:
    spans: list[Span] = []
    start = haystack.find(needle)
    while start != -1:
        spans.append((start, start + len(needle)))
        start = haystack.find(needle, start + len(needle))
    return tuple(spans)


def score_value(term: str, value: str, cutoff: float) -> tuple[float, tuple[Span, ...]] | None:
    """
    Similarity of a lowercase term against one field value.

    Literal occurrences score 100. Otherwise the best-aligned substring of
    the value is compared with rapidfuzz's partial ratio; values shorter
    than the term are compared whole, so "rowing" does not match "Row".

    Args:
        term: Lowercase search term
        value: Field value (any case)
        cutoff: Minimum similarity (0-100)

    Returns:
        ``(similarity, spans)`` or None below the cutoff
    """
    lowered = value.lower()
    if not lowered or not term:
        return None

    if term in lowered:
        return 100.0, _literal_spans(lowered, term)

    if len(lowered) < len(term):
        similarity = fuzz.ratio(term, lowered, score_cutoff=cutoff)
        if not similarity:
            return None
        return similarity, ((0, len(value)),)

    alignment = fuzz.partial_ratio_alignment(term, lowered, score_cutoff=cutoff)
    if alignment is None or alignment.score < cutoff:
        return None
    return alignment.score, ((alignment.dest_start, alignment.dest_end),)


def fuzzy_search(
    workouts: Sequence[Workout],
    term: str,
    threshold: float = SEARCH_THRESHOLD_SINGLE,
    fields: Sequence[str] = SEARCH_FIELDS,
) -> list[SearchResult]:
    """
    Fuzzy search for one term.

    Results are ranked by their best field similarity; ties keep corpus
    order. Each result lists the fields that matched with their spans.
    """
    needle = term.strip().lower()
    if not needle:
        return []
    cutoff = similarity_cutoff(threshold)

    scored: list[SearchResult] = []
    for workout in workouts:
        locations: list[MatchLocation] = []
        best = 0.0
        for key in fields:
            for value, ref_index in _field_values(workout, key):
                hit = score_value(needle, value, cutoff)
                if hit is None:
                    continue
                similarity, spans = hit
                best = max(best, similarity)
                locations.append(MatchLocation(key, value, spans, ref_index))
        if locations:
            scored.append(SearchResult(workout, tuple(locations), best))

    scored.sort(key=lambda r: -r.score)
    return scored


def exact_search(workouts: Sequence[Workout], phrase: str) -> list[SearchResult]:
    """Literal phrase search over name, description and movements (corpus order)."""
    needle = phrase.lower()
    if not needle.strip():
        return []

    results: list[SearchResult] = []
    for workout in workouts:
        for key in EXACT_SEARCH_FIELDS:
            if any(needle in value.lower() for value, _ in _field_values(workout, key)):
                results.append(SearchResult(workout, None))
                break
    return results


def multi_term_search(
    workouts: Sequence[Workout],
    terms: Sequence[str],
    threshold: float = SEARCH_THRESHOLD_MULTI,
) -> list[SearchResult]:
    """
    AND of independent per-term fuzzy searches.

    Keeps the first term's ranking. Match locations are dropped: spans
    from separate searches do not describe the intersection.
    """
    if not terms:
        return []

    per_term = [fuzzy_search(workouts, term, threshold) for term in terms]
    for term, results in zip(terms, per_term):
        logger.debug("term %r matched %d workouts", term, len(results))

    common_ids = set.intersection(*({r.workout.id for r in results} for results in per_term))
    combined = [
        SearchResult(r.workout, None, r.score) for r in per_term[0] if r.workout.id in common_ids
    ]
    logger.debug("%d workouts matched all of %s", len(combined), list(terms))
    return combined


def search_workouts(workouts: Sequence[Workout], query: str) -> list[SearchResult]:
    """
    Search the corpus with a raw query string.

    Args:
        workouts: Corpus snapshot
        query: Raw query from the user

    Returns:
        Matching workouts; empty for a blank query or no matches
    """
    trimmed = query.strip()
    if not trimmed:
        return []

    if is_exact_query(trimmed):
        return exact_search(workouts, exact_phrase(trimmed))

    terms = trimmed.split()
    if len(terms) > 1:
        return multi_term_search(workouts, terms)
    return fuzzy_search(workouts, terms[0])
