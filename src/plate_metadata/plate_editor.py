"""
plate_editor.py
---------------
Structural edits on a PlateStore: insert, duplicate, delete and move plates.

Every operation builds the new plate list, renumbers all plates 1..N in list
order and hands the result back to the store in one ``set_all`` call. Each
returns the index that should become active.
"""

from __future__ import annotations

from typing import List

from plate_metadata.errors import InvalidOperation
from plate_metadata.plate_store import Plate, PlateStore, new_plate


def renumber(plates: List[Plate]) -> List[Plate]:
    return [Plate(id=i + 1, metadata=p.metadata) for i, p in enumerate(plates)]


def clone_plate(plate: Plate) -> Plate:
    """Independent copy of ``plate``; no metadata record is shared."""
    return Plate(id=plate.id, metadata={w: m.copy() for w, m in plate.metadata.items()})


def _check_index(store: PlateStore, index: int) -> None:
    if not 0 <= index < len(store):
        raise InvalidOperation(f"Invalid plate position: {index}")


def _insert_after(store: PlateStore, index: int, plate: Plate) -> int:
    plates = store.all()
    plates.insert(index + 1, plate)
    store.set_all(renumber(plates))
    return index + 1


def add_after(store: PlateStore, index: int) -> int:
    """Insert a default plate right after ``index``."""
    _check_index(store, index)
    return _insert_after(store, index, new_plate(len(store) + 1))


def duplicate_after(store: PlateStore, index: int) -> int:
    """Insert a copy of plate ``index`` right after it."""
    _check_index(store, index)
    return _insert_after(store, index, clone_plate(store.get(index)))


def delete_at(store: PlateStore, index: int) -> int:
    if len(store) == 1:
        raise InvalidOperation("You must have at least one plate.")
    _check_index(store, index)
    plates = store.all()
    del plates[index]
    store.set_all(renumber(plates))
    return max(0, index - 1)


def move_to(store: PlateStore, from_index: int, to_index: int) -> int:
    if len(store) == 1:
        raise InvalidOperation("You must have at least one plate.")
    if not 0 <= to_index < len(store):
        raise InvalidOperation(f"Invalid plate position: {to_index}")
    _check_index(store, from_index)
    plates = store.all()
    plate = plates.pop(from_index)
    plates.insert(to_index, plate)
    store.set_all(renumber(plates))
    return to_index
