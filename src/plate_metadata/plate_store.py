"""
plate_store.py
--------------
Ordered collection of plates. Each plate owns a complete 96-well metadata map.

All changes go through whole-plate (``replace``) or whole-collection
(``set_all``) replacement; both check the 96-well completeness of every plate
they accept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from plate_metadata.errors import IncompletePlateError
from plate_metadata.well_grid import WELL_IDS, WellMetadata, default_metadata


@dataclass
class Plate:
    id: int
    metadata: Dict[str, WellMetadata] = field(default_factory=default_metadata)

    def is_empty(self) -> bool:
        return all(m.is_empty() for m in self.metadata.values())


def new_plate(plate_id: int = 1) -> Plate:
    return Plate(id=plate_id, metadata=default_metadata())


def _detached(plate: Plate) -> Plate:
    # records are frozen, so a new map is enough to isolate the caller
    return Plate(id=plate.id, metadata=dict(plate.metadata))


def check_plate(plate: Plate) -> None:
    """Raise IncompletePlateError unless ``plate`` holds exactly the 96 wells."""
    keys = set(plate.metadata)
    if keys != set(WELL_IDS):
        missing = sorted(set(WELL_IDS) - keys)
        extra = sorted(keys - set(WELL_IDS))
        raise IncompletePlateError(
            f"Plate {plate.id} metadata must cover the 96 wells "
            f"(missing: {missing[:5]}, unexpected: {extra[:5]})"
        )
    for well_id, meta in plate.metadata.items():
        if not isinstance(meta, WellMetadata):
            raise IncompletePlateError(f"Plate {plate.id} well {well_id} has no metadata record")


class PlateStore:
    """Authoritative, ordered list of plates (never empty)."""

    def __init__(self, plates: Optional[Iterable[Plate]] = None):
        self._plates: List[Plate] = []
        self.set_all(list(plates) if plates is not None else [new_plate(1)])

    def __len__(self) -> int:
        return len(self._plates)

    def get(self, index: int) -> Plate:
        """Return plate ``index``; editing the returned map does not touch the store."""
        return _detached(self._plates[index])

    def replace(self, index: int, plate: Plate) -> None:
        if not 0 <= index < len(self._plates):
            raise IndexError(f"Plate index {index} out of range")
        check_plate(plate)
        self._plates[index] = _detached(plate)

    def all(self) -> List[Plate]:
        return [_detached(p) for p in self._plates]

    def set_all(self, plates: List[Plate]) -> None:
        if not plates:
            raise ValueError("A plate collection needs at least one plate")
        for plate in plates:
            check_plate(plate)
        self._plates = [_detached(p) for p in plates]

    def ids(self) -> List[int]:
        return [p.id for p in self._plates]
