"""
well_grid.py
------------
Canonical 96-well geometry and the per-well metadata record.

Wells are named row letter + column number (``A1`` .. ``H12``) and are always
enumerated row-major: A1..A12, B1..B12, ..., H1..H12.
"""

from __future__ import annotations

import string
from dataclasses import astuple, dataclass, fields, replace
from typing import Dict, List, Tuple


ROW_LABELS: Tuple[str, ...] = tuple(string.ascii_uppercase[:8])
COLUMNS: Tuple[int, ...] = tuple(range(1, 13))

METADATA_FIELDS: Tuple[str, ...] = (
    "base_strain",
    "receptor",
    "anchor",
    "nanobody",
    "negsel",
    "dilution",
    "notes",
)


def well_ids() -> List[str]:
    """Return the 96 well identifiers in row-major order."""
    return [f"{r}{c}" for r in ROW_LABELS for c in COLUMNS]


WELL_IDS: Tuple[str, ...] = tuple(well_ids())
_WELL_SET = frozenset(WELL_IDS)


def is_well_id(token: str) -> bool:
    return token in _WELL_SET


@dataclass(frozen=True)
class WellMetadata:
    """Seven string fields describing the content of one well (immutable)."""
    base_strain: str = ""
    receptor: str = ""
    anchor: str = ""
    nanobody: str = ""
    negsel: str = ""
    dilution: str = ""
    notes: str = ""

    def is_empty(self) -> bool:
        return all(v == "" for v in astuple(self))

    def values(self) -> List[str]:
        return [getattr(self, name) for name in METADATA_FIELDS]

    def copy(self) -> "WellMetadata":
        # fields are plain strings, a field-by-field copy is a full clone
        return WellMetadata(**{f.name: getattr(self, f.name) for f in fields(self)})

    def with_field(self, field_name: str, value: str) -> "WellMetadata":
        check_field(field_name)
        return replace(self, **{field_name: value})


def check_field(field_name: str) -> None:
    if field_name not in METADATA_FIELDS:
        raise ValueError(
            f"Unknown metadata field '{field_name}'. Expected one of: {', '.join(METADATA_FIELDS)}"
        )


def default_metadata() -> Dict[str, WellMetadata]:
    """Return a fresh all-default metadata map covering every well."""
    return {well: WellMetadata() for well in WELL_IDS}
