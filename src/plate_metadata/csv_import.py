"""
csv_import.py
-------------
Reads plate metadata from one of two spreadsheet layouts.

Legacy format (the one written by csv_export.serialize_legacy)::

    from_block,well,base_strain,receptor,anchor,nanobody,negsel,dilution,notes
    1,A1,StrainX,,,,,,
    1,A2,empty,empty,empty,empty,empty,empty,empty

Layout format (a positional base-strain grid per plate)::

    Block 2
    ,1,2,3,...,12
    A,S1,S2,S3,...,S12
    B,...

The format is detected from the content, never from the file name.
"""

from __future__ import annotations

import csv
import re
import warnings
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from plate_metadata.errors import PlateMetadataWarning, UnrecognizedFormatError
from plate_metadata.plate_store import Plate
from plate_metadata.well_grid import (
    COLUMNS,
    METADATA_FIELDS,
    ROW_LABELS,
    WellMetadata,
    default_metadata,
    is_well_id,
)

LEGACY = "legacy"
LAYOUT = "layout"

PLATE_COLUMN = "from_block"
WELL_COLUMN = "well"
LEGACY_COLUMNS = [PLATE_COLUMN, WELL_COLUMN, *METADATA_FIELDS]
EMPTY_SENTINEL = "empty"
BLOCK_PREFIX = "Block"

EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xls")

Rows = List[List[str]]


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_grid(path: Union[str, Path]) -> Rows:
    """Return the cells of a CSV or Excel sheet as rows of strings.

    Blank lines are skipped; rows keep their own length (CSV rows may be ragged).
    """
    path = Path(path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        df = pd.read_excel(path, header=None, dtype=str).dropna(how="all")
        df = df.fillna("")
        return [[str(v) for v in row] for row in df.itertuples(index=False)]

    with path.open(newline="", encoding="utf-8-sig") as f:
        return [row for row in csv.reader(f) if row and row != [""]]


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

def detect_format(rows: Sequence[Sequence[str]]) -> str:
    """Return LEGACY or LAYOUT; raise UnrecognizedFormatError otherwise."""
    if rows and any(str(cell).strip() == PLATE_COLUMN for cell in rows[0]):
        return LEGACY
    for row in rows:
        if row and str(row[0]).startswith(BLOCK_PREFIX):
            return LAYOUT
    raise UnrecognizedFormatError(
        f"Unrecognized plate file: no '{PLATE_COLUMN}' header and no '{BLOCK_PREFIX} <n>' marker found"
    )


# ---------------------------------------------------------------------------
# Legacy format
# ---------------------------------------------------------------------------

def _parse_plate_id(raw) -> Optional[int]:
    match = re.match(r"\s*([+-]?\d+)", str(raw))
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


def _fit(row: Sequence[str], width: int) -> List[str]:
    row = list(row[:width])
    return row + [""] * (width - len(row))


def _legacy_record(rec: Dict[str, str]) -> WellMetadata:
    values = {name: rec.get(name) or "" for name in METADATA_FIELDS}
    if all(v == EMPTY_SENTINEL for v in values.values()):
        return WellMetadata()
    return WellMetadata(**values)


def parse_legacy(rows: Sequence[Sequence[str]]) -> List[Plate]:
    """One plate per distinct ``from_block`` value, in ascending id order.

    Rows without a usable plate id or well id are skipped.
    """
    header = [str(h).strip() for h in rows[0]]
    body = [_fit(r, len(header)) for r in rows[1:]]
    df = pd.DataFrame(body, columns=header, dtype=str)
    df = df.loc[:, ~df.columns.duplicated()]
    df = df.reindex(columns=LEGACY_COLUMNS, fill_value="")

    df["_plate"] = df[PLATE_COLUMN].map(_parse_plate_id)
    df[WELL_COLUMN] = df[WELL_COLUMN].fillna("").astype(str).str.strip()
    valid = df["_plate"].notna() & df[WELL_COLUMN].map(is_well_id).astype(bool)
    df = df[valid]

    plates: List[Plate] = []
    for plate_id, group in df.groupby("_plate", sort=True):
        metadata = default_metadata()
        for rec in group.to_dict("records"):
            metadata[rec[WELL_COLUMN]] = _legacy_record(rec)
        plates.append(Plate(id=int(plate_id), metadata=metadata))
    return plates


# ---------------------------------------------------------------------------
# Layout format
# ---------------------------------------------------------------------------

def _parse_block_marker(cell: str) -> Optional[int]:
    match = re.match(rf"{BLOCK_PREFIX}\s*(\d+)", cell)
    return int(match.group(1)) if match else None


def parse_layout(rows: Sequence[Sequence[str]]) -> List[Plate]:
    """One plate per ``Block <n>`` marker, in file order (base_strain only)."""
    plates: List[Plate] = []
    current: Optional[Plate] = None

    for row in rows:
        if not row:
            continue
        first = str(row[0])
        if first.startswith(BLOCK_PREFIX):
            if current is not None:
                plates.append(current)
            plate_id = _parse_block_marker(first)
            if plate_id is None:
                warnings.warn(f"Ignoring block without a plate number: '{first}'", PlateMetadataWarning)
                current = None
            else:
                current = Plate(id=plate_id, metadata=default_metadata())
            continue

        label = first.strip()
        if current is None or label not in ROW_LABELS:
            continue
        cells = _fit(row[1:], len(COLUMNS))
        for col, cell in zip(COLUMNS, cells):
            current.metadata[f"{label}{col}"] = WellMetadata(base_strain=str(cell).strip())

    if current is not None:
        plates.append(current)
    return plates


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def import_plates(rows: Sequence[Sequence[str]]) -> List[Plate]:
    """Detect the layout, parse it and drop plates with no metadata at all.

    An empty result means the caller should keep its current plates.
    """
    parser = parse_legacy if detect_format(rows) == LEGACY else parse_layout
    return [p for p in parser(rows) if not p.is_empty()]


def import_file(path: Union[str, Path]) -> List[Plate]:
    return import_plates(read_grid(path))
