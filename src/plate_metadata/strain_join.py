"""Backfill negsel/anchor/receptor from a reference table by base strain."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from plate_metadata.errors import PlateMetadataWarning
from plate_metadata.plate_store import Plate, PlateStore
from plate_metadata.reference_table import ReferenceTable

# well field <- reference column
JOIN_COLUMNS = (
    ("negsel", "Construct_1"),
    ("anchor", "Construct_2"),
    ("receptor", "Construct_3"),
)

WellRef = Tuple[int, str]


@dataclass
class JoinReport:
    matched: List[WellRef] = field(default_factory=list)
    unmatched: List[WellRef] = field(default_factory=list)
    skipped: List[WellRef] = field(default_factory=list)
    unmatched_strains: List[str] = field(default_factory=list)


def join_plate(plate: Plate, table: ReferenceTable, report: JoinReport) -> Plate:
    metadata = dict(plate.metadata)
    for well, meta in plate.metadata.items():
        strain = meta.base_strain
        if not strain:
            report.skipped.append((plate.id, well))
            continue
        row = table.lookup(strain)
        if row is None:
            report.unmatched.append((plate.id, well))
            if strain not in report.unmatched_strains:
                report.unmatched_strains.append(strain)
            continue
        metadata[well] = replace(meta, **{f: row.get(col) or "" for f, col in JOIN_COLUMNS})
        report.matched.append((plate.id, well))
    return Plate(id=plate.id, metadata=metadata)


def resolve_strains(store: PlateStore, table: ReferenceTable, indices: Sequence[int]) -> JoinReport:
    """Join every plate in ``indices``; the reference table is never modified."""
    report = JoinReport()
    for index in indices:
        store.replace(index, join_plate(store.get(index), table, report))
    if report.unmatched_strains:
        warnings.warn(
            f"{len(report.unmatched)} well(s) had no reference row for strain(s): "
            + ", ".join(report.unmatched_strains),
            PlateMetadataWarning,
        )
    return report
