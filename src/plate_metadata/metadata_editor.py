"""Field-level edits on a single plate."""

from __future__ import annotations

from typing import AbstractSet

from plate_metadata.errors import InvalidOperation
from plate_metadata.plate_store import Plate
from plate_metadata.well_grid import check_field, default_metadata


def apply_bulk_update(plate: Plate, selection: AbstractSet[str], field: str, value: str) -> Plate:
    """Return ``plate`` with ``field`` set to ``value`` on every selected well.

    Other fields of the selected wells and all unselected wells are left as
    they are. An empty selection returns the plate unchanged.
    """
    check_field(field)
    if not selection:
        return plate
    unknown = [w for w in selection if w not in plate.metadata]
    if unknown:
        raise InvalidOperation(f"Unknown wells in selection: {', '.join(sorted(unknown))}")

    metadata = dict(plate.metadata)
    for well in selection:
        metadata[well] = metadata[well].with_field(field, value)
    return Plate(id=plate.id, metadata=metadata)


def clear_all_fields(plate: Plate) -> Plate:
    """Reset every well of ``plate`` to the default record.

    This clears all seven fields, not only the one currently displayed.
    """
    return Plate(id=plate.id, metadata=default_metadata())
