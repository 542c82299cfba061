"""
Alias registry.

The alias tables are built once at import time from the YAML files in
``src/wodkit/data/aliases/`` (plus user overrides) and exposed as
read-only mappings. If the movement table cannot be loaded a
RuntimeError is raised: normalization has no meaning without it.
"""

from types import MappingProxyType
from typing import Mapping

from .loader import load_alias_table


def _build_movement_aliases() -> Mapping[str, str]:
    table = load_alias_table("movements", lowercase_keys=True)
    if not table:
        raise RuntimeError(
            "wodkit: no movement aliases could be loaded. "
            "Check that src/wodkit/data/aliases/movements.yaml is present and valid."
        )
    return MappingProxyType(table)


# Raw lowercase variant -> canonical movement name
MOVEMENT_ALIASES: Mapping[str, str] = _build_movement_aliases()

# Legacy export title -> workout name in this corpus (case-sensitive)
IMPORT_ALIASES: Mapping[str, str] = MappingProxyType(load_alias_table("imports"))


def canonical_movement_names() -> frozenset[str]:
    """Return every canonical name the movement table can produce."""
    return frozenset(MOVEMENT_ALIASES.values())
