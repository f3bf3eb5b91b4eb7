"""Pytest configuration and shared fixtures."""
import matplotlib

matplotlib.use("Agg")

import pytest

from plate_metadata.plate_store import PlateStore, new_plate
from plate_metadata.session import Session
from plate_metadata.well_grid import WellMetadata


def make_store(n: int) -> PlateStore:
    """Store with ``n`` plates; plate i has base_strain ``P<i>`` in A1."""
    plates = []
    for i in range(1, n + 1):
        plate = new_plate(i)
        plate.metadata["A1"] = WellMetadata(base_strain=f"P{i}")
        plates.append(plate)
    return PlateStore(plates)


@pytest.fixture
def store3():
    return make_store(3)


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path and return its path."""
    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def reference_csv(write_file):
    return write_file(
        "np_plasmids.csv",
        "NP Plasmids export,,,,\n"
        "Strain Name,Construct 1,Construct 2,Construct 3,Notes\n"
        "S1,N,A,R,first\n"
        "S2,N2,A2,R2,\n"
        "S1,other,other,other,duplicate\n",
    )


def set_well(store: PlateStore, index: int, well: str, meta: WellMetadata) -> None:
    """Replace one well's record through the store."""
    plate = store.get(index)
    plate.metadata[well] = meta
    store.replace(index, plate)
