"""
Alias tables for wodkit.

MOVEMENT_ALIASES maps raw movement variants to canonical names;
IMPORT_ALIASES maps legacy export titles to workout names.
"""

from .registry import IMPORT_ALIASES, MOVEMENT_ALIASES, canonical_movement_names

__all__ = [
    "IMPORT_ALIASES",
    "MOVEMENT_ALIASES",
    "canonical_movement_names",
]
