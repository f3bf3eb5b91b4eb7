"""
session.py
----------
In-memory editing session behind the plate grid view.

The session keeps the plate store together with the view state: which plate
is active, which wells are selected, which field is displayed and which
reference table is loaded. A grid surface reads ``current_well_map()`` and
reports user selections through ``select()``.

Rejected commands (deleting the only plate, a bad move target, an unreadable
file) emit a ``PlateMetadataWarning`` and return ``False``; the plates stay as
they were.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Union

from plate_metadata import csv_import, metadata_editor, plate_editor
from plate_metadata.csv_export import serialize_legacy
from plate_metadata.errors import InvalidOperation, PlateMetadataWarning
from plate_metadata.plate_store import Plate, PlateStore
from plate_metadata.reference_table import ReferenceTable
from plate_metadata.strain_join import JoinReport, resolve_strains
from plate_metadata.well_grid import METADATA_FIELDS, WellMetadata, check_field, is_well_id

SCOPE_CURRENT = "current"
SCOPE_ALL = "all"


def _reject(message: str) -> bool:
    warnings.warn(message, PlateMetadataWarning)
    return False


class Session:
    def __init__(self, store: Optional[PlateStore] = None):
        self.store = store if store is not None else PlateStore()
        self.current_index = 0
        self.selection: FrozenSet[str] = frozenset()
        self.displayed_field = METADATA_FIELDS[0]
        self.reference: Optional[ReferenceTable] = None
        self.batch_running = False

    # ---------- view state ----------

    @property
    def current_plate(self) -> Plate:
        return self.store.get(self.current_index)

    def current_well_map(self) -> Dict[str, WellMetadata]:
        return dict(self.current_plate.metadata)

    def set_displayed_field(self, field: str) -> None:
        check_field(field)
        self.displayed_field = field

    def select(self, wells: Iterable[str]) -> None:
        wells = frozenset(wells)
        unknown = sorted(w for w in wells if not is_well_id(w))
        if unknown:
            raise ValueError(f"Unknown wells: {', '.join(unknown)}")
        self.selection = wells

    def deselect_all(self) -> None:
        self.selection = frozenset()

    def go_to(self, index: int) -> None:
        if not 0 <= index < len(self.store):
            raise IndexError(f"Plate index {index} out of range")
        self.current_index = index
        self.deselect_all()

    def next_plate(self) -> bool:
        if self.current_index >= len(self.store) - 1:
            return False
        self.go_to(self.current_index + 1)
        return True

    def previous_plate(self) -> bool:
        if self.current_index == 0:
            return False
        self.go_to(self.current_index - 1)
        return True

    # ---------- metadata edits ----------

    def apply_bulk(self, value: str) -> None:
        """Write ``value`` into the displayed field of the selected wells."""
        if self.selection:
            plate = metadata_editor.apply_bulk_update(
                self.current_plate, self.selection, self.displayed_field, value
            )
            self.store.replace(self.current_index, plate)
        self.deselect_all()

    def clear_plate(self) -> None:
        self.store.replace(self.current_index, metadata_editor.clear_all_fields(self.current_plate))

    # ---------- structural edits ----------

    def _structural(self, operation, *args) -> bool:
        try:
            index = operation(self.store, *args)
        except InvalidOperation as exc:
            return _reject(str(exc))
        self.go_to(index)
        return True

    def add_plate(self) -> bool:
        return self._structural(plate_editor.add_after, self.current_index)

    def copy_plate(self) -> bool:
        return self._structural(plate_editor.duplicate_after, self.current_index)

    def delete_plate(self) -> bool:
        return self._structural(plate_editor.delete_at, self.current_index)

    def move_plate(self, to_index: int) -> bool:
        return self._structural(plate_editor.move_to, self.current_index, to_index)

    # ---------- files ----------

    def import_file(self, path: Union[str, Path]) -> bool:
        """Replace all plates with the ones read from ``path``."""
        try:
            plates = csv_import.import_file(path)
        except (ValueError, OSError) as exc:
            return _reject(f"Could not import {path}: {exc}")
        if not plates:
            return _reject(f"No plate metadata found in {path}")
        self.store.set_all(plates)
        self.go_to(0)
        return True

    def load_reference(self, path: Union[str, Path]) -> bool:
        try:
            self.reference = ReferenceTable.from_file(path)
        except (ValueError, OSError) as exc:
            return _reject(f"Could not load reference table {path}: {exc}")
        return True

    def search_strain(self, scope: str = SCOPE_ALL) -> Optional[JoinReport]:
        if self.reference is None:
            _reject("Load a reference table before searching strains.")
            return None
        if scope == SCOPE_CURRENT:
            indices = [self.current_index]
        elif scope == SCOPE_ALL:
            indices = list(range(len(self.store)))
        else:
            raise ValueError(f"Unknown scope '{scope}'")
        return resolve_strains(self.store, self.reference, indices)

    def export_csv(self) -> str:
        return serialize_legacy(self.store.all())
