"""
YAML -> alias table loader.

Loads alias tables from the bundled ``src/wodkit/data/aliases/`` directory.
Each file (e.g. movements.yaml) holds a single ``aliases`` mapping of raw
variant -> canonical name.

User overrides: place a file with the same name in ``~/.wodkit/aliases/``.
Its entries are merged over the bundled table, so only new or changed
variants need to be listed.

Usage (internal, called by registry.py):
    from .loader import load_alias_table
    movements = load_alias_table("movements", lowercase_keys=True)
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml


def alias_table_from_dict(d: dict, *, lowercase_keys: bool = False) -> dict[str, str]:
    """Convert a raw dict (from YAML) to a ``{variant: canonical}`` table.

    Raises ValueError if the ``aliases`` mapping is absent or malformed.
    """
    raw = d.get("aliases")
    if not isinstance(raw, dict):
        raise ValueError("alias file must contain an 'aliases' mapping")

    table: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError(f"alias entries must be strings, got {key!r}: {value!r}")
        variant = key.strip().lower() if lowercase_keys else key
        if not variant or not value.strip():
            raise ValueError(f"empty alias entry: {key!r}: {value!r}")
        table[variant] = value.strip()
    return table


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} and warn if it cannot be read or parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"wodkit: ignoring alias file {path} ({exc})", stacklevel=3)
        return {}
    return data if isinstance(data, dict) else {}


def _get_bundled_aliases_dir() -> Path:
    # loader.py lives at src/wodkit/core/aliases/loader.py
    return Path(__file__).parent.parent.parent / "data" / "aliases"


def _get_user_aliases_dir() -> Path | None:
    """Return ~/.wodkit/aliases/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".wodkit" / "aliases"
    return p if p.is_dir() else None


def load_alias_table(name: str, *, lowercase_keys: bool = False) -> dict[str, str]:
    """Return the merged ``{variant: canonical}`` table for ``<name>.yaml``.

    The bundled file is loaded first; a user file of the same name is
    merged over it. A file with invalid entries is skipped with a warning.

    Args:
        name: Table name (file stem), e.g. "movements"
        lowercase_keys: Normalize variant keys to trimmed lowercase

    Returns:
        Alias table; empty if neither file could be loaded
    """
    table: dict[str, str] = {}

    sources = [_get_bundled_aliases_dir() / f"{name}.yaml"]
    user_dir = _get_user_aliases_dir()
    if user_dir is not None:
        sources.append(user_dir / f"{name}.yaml")

    for path in sources:
        if not path.exists():
            continue
        raw = _load_yaml_file(path)
        if not raw:
            continue
        try:
            table.update(alias_table_from_dict(raw, lowercase_keys=lowercase_keys))
        except ValueError as exc:
            warnings.warn(
                f"wodkit: skipping alias file '{path}' ({exc})",
                stacklevel=2,
            )

    return table
