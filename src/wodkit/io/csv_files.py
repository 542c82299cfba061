"""
CSV file reading and writing for score import/export.
"""

import csv
from pathlib import Path
from typing import Iterable

from ..core.config import NATIVE_HEADERS


def read_csv_rows(path: str | Path) -> tuple[list[str], list[dict[str, str]]]:
    """
    Read a CSV file with a header row.

    Blank lines are skipped. A leading UTF-8 BOM is ignored.

    Args:
        path: CSV file path

    Returns:
        (headers, rows as {header: cell})

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        rows = [row for row in reader if any(isinstance(v, str) and v.strip() for v in row.values())]
        headers = list(reader.fieldnames or [])
    return headers, rows


def write_native_csv(path: str | Path, rows: Iterable[dict[str, str]]) -> int:
    """
    Write rows in the native export schema.

    Returns:
        Number of data rows written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(NATIVE_HEADERS))
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
            count += 1
    return count
