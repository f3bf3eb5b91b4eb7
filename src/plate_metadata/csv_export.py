"""
csv_export.py
-------------
Writes plates back out in the legacy (``from_block``) format, and as a Layout
base-strain grid usable as a fill-in template.

Values are joined with commas without quoting; metadata must not contain
commas or line breaks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union

from plate_metadata.csv_import import BLOCK_PREFIX, EMPTY_SENTINEL, LEGACY_COLUMNS
from plate_metadata.plate_store import Plate
from plate_metadata.well_grid import COLUMNS, METADATA_FIELDS, ROW_LABELS, WELL_IDS

LEGACY_HEADER = ",".join(LEGACY_COLUMNS)


def serialize_legacy(plates: Iterable[Plate]) -> str:
    lines: List[str] = []
    for plate in plates:
        for well in WELL_IDS:
            meta = plate.metadata[well]
            values = [EMPTY_SENTINEL] * len(METADATA_FIELDS) if meta.is_empty() else meta.values()
            lines.append(",".join([str(plate.id), well, *values]))
    return LEGACY_HEADER + "\n" + "\n".join(lines)


def serialize_layout(plates: Iterable[Plate]) -> str:
    lines: List[str] = []
    for plate in plates:
        lines.append(f"{BLOCK_PREFIX} {plate.id}")
        lines.append("," + ",".join(str(c) for c in COLUMNS))
        for row in ROW_LABELS:
            strains = [plate.metadata[f"{row}{c}"].base_strain for c in COLUMNS]
            lines.append(",".join([row, *strains]))
    return "\n".join(lines) + "\n"


def write_csv(path: Union[str, Path], text: str) -> Path:
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path
