"""
reference_table.py
------------------
Loader for the plasmid/strain reference sheet used to backfill well metadata.

The sheet starts with a banner row, followed by a header row and the data:

    NP Plasmids (exported 2024-05-01)
    Strain Name,Construct 1,Construct 2,Construct 3,Notes,Notes
    S1,negsel-a,anchor-b,receptor-c,,
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from plate_metadata.csv_import import read_grid
from plate_metadata.errors import InsufficientReferenceData

STRAIN_KEY = "Strain_Name"


def normalize_headers(raw: Sequence[str]) -> List[str]:
    """Trim headers, turn whitespace runs into ``_`` and make every name unique.

    Repeats get a counter suffix: ``Notes``, ``Notes_2``, ``Notes_3``.
    """
    headers: List[str] = []
    counts: Dict[str, int] = {}
    for token in raw:
        name = re.sub(r"\s+", "_", str(token).strip())
        unique = name
        # a raw header may itself match a suffix generated earlier
        while unique in headers:
            counts[name] = counts.get(name, 1) + 1
            unique = f"{name}_{counts[name]}"
        counts.setdefault(name, 1)
        headers.append(unique)
    return headers


class ReferenceTable:
    """Read-only rows keyed by normalized header; first ``Strain_Name`` match wins."""

    def __init__(self, frame: pd.DataFrame):
        if STRAIN_KEY not in frame.columns:
            raise InsufficientReferenceData(f"Reference table has no '{STRAIN_KEY}' column")
        self.frame = frame
        self._first_row: Dict[str, int] = {}
        for pos, strain in enumerate(frame[STRAIN_KEY]):
            self._first_row.setdefault(strain, pos)

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def headers(self) -> List[str]:
        return list(self.frame.columns)

    @property
    def rows(self) -> List[Dict[str, str]]:
        return self.frame.to_dict("records")

    def lookup(self, strain: str) -> Optional[Dict[str, str]]:
        """Exact, case-sensitive match on ``Strain_Name``."""
        pos = self._first_row.get(strain)
        if pos is None:
            return None
        return self.frame.iloc[pos].to_dict()

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "ReferenceTable":
        if len(rows) < 2:
            raise InsufficientReferenceData("Reference file does not contain enough rows")
        headers = normalize_headers(rows[1])
        width = len(headers)
        records = []
        for row in rows[2:]:
            cells = [str(c) for c in row[:width]]
            cells += [""] * (width - len(cells))
            if any(c != "" for c in cells):
                records.append(cells)
        return cls(pd.DataFrame(records, columns=headers, dtype=str))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ReferenceTable":
        return cls.from_rows(read_grid(path))
