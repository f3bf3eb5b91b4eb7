"""Tests for the editing session behind the grid view."""
import pytest

from conftest import make_store, set_well
from plate_metadata.errors import PlateMetadataWarning
from plate_metadata.session import SCOPE_CURRENT, Session
from plate_metadata.well_grid import WellMetadata

HEADER = "from_block,well,base_strain,receptor,anchor,nanobody,negsel,dilution,notes"


def test_apply_bulk_uses_displayed_field_and_clears_selection(session):
    session.set_displayed_field("nanobody")
    session.select({"A1", "A2"})
    session.apply_bulk("nb7")
    assert session.current_plate.metadata["A1"].nanobody == "nb7"
    assert session.current_plate.metadata["A3"].nanobody == ""
    assert session.selection == frozenset()


def test_apply_bulk_without_selection_changes_nothing(session):
    session.apply_bulk("x")
    assert session.current_plate.is_empty()


def test_select_rejects_unknown_wells(session):
    with pytest.raises(ValueError):
        session.select({"A1", "J1"})
    assert session.selection == frozenset()


def test_set_displayed_field_validates(session):
    with pytest.raises(ValueError):
        session.set_displayed_field("colour")
    assert session.displayed_field == "base_strain"


def test_clear_plate_only_affects_current():
    session = Session(make_store(2))
    session.clear_plate()
    assert session.store.get(0).is_empty()
    assert session.store.get(1).metadata["A1"].base_strain == "P2"


def test_navigation_bounds(session):
    assert not session.previous_plate()
    assert not session.next_plate()
    session.add_plate()
    assert session.current_index == 1
    assert session.previous_plate()
    assert session.current_index == 0
    assert session.next_plate()


def test_structural_commands_track_active_index():
    session = Session(make_store(3))
    session.go_to(1)
    assert session.copy_plate()
    assert session.current_index == 2
    assert session.current_plate.metadata["A1"].base_strain == "P2"
    assert session.store.ids() == [1, 2, 3, 4]

    assert session.move_plate(0)
    assert session.current_index == 0
    assert session.current_plate.id == 1

    assert session.delete_plate()
    assert session.current_index == 0
    assert session.store.ids() == [1, 2, 3]


def test_rejected_structural_commands_warn(session):
    session.select({"A1"})
    with pytest.warns(PlateMetadataWarning, match="at least one plate"):
        assert not session.delete_plate()
    assert len(session.store) == 1
    assert session.selection == frozenset({"A1"})

    session.add_plate()
    with pytest.warns(PlateMetadataWarning):
        assert not session.move_plate(5)
    assert session.store.ids() == [1, 2]


def test_import_replaces_plates_and_resets_index(session, write_file):
    session.add_plate()
    path = write_file("spots.csv", HEADER + "\n4,B3,S1,,,,,,\n7,A1,S2,,,,,,\n")
    assert session.import_file(path)
    assert session.current_index == 0
    assert session.store.ids() == [4, 7]


def test_import_failure_keeps_plates(session, write_file):
    session.select({"A1"})
    session.apply_bulk("keep")
    with pytest.warns(PlateMetadataWarning):
        assert not session.import_file(write_file("junk.csv", "a,b\n1,2\n"))
    with pytest.warns(PlateMetadataWarning):
        assert not session.import_file(write_file("blank.csv", "Block 1\nA,,\n"))
    assert session.current_plate.metadata["A1"].base_strain == "keep"


def test_reference_load_failure_keeps_previous_table(session, reference_csv, write_file):
    assert session.load_reference(reference_csv)
    table = session.reference
    with pytest.warns(PlateMetadataWarning):
        assert not session.load_reference(write_file("short.csv", "title only\n"))
    assert session.reference is table


def test_search_strain_scopes(reference_csv):
    session = Session(make_store(2))
    for i in range(2):
        set_well(session.store, i, "A1", WellMetadata(base_strain="S1"))
    session.load_reference(reference_csv)

    session.search_strain(SCOPE_CURRENT)
    assert session.store.get(0).metadata["A1"].receptor == "R"
    assert session.store.get(1).metadata["A1"].receptor == ""

    report = session.search_strain()
    assert session.store.get(1).metadata["A1"].receptor == "R"
    assert len(report.matched) == 2


def test_search_strain_without_reference_warns(session):
    with pytest.warns(PlateMetadataWarning):
        assert session.search_strain() is None


def test_export_matches_serializer(session):
    text = session.export_csv()
    assert text.splitlines()[0] == HEADER
    assert text.splitlines()[1] == "1,A1,empty,empty,empty,empty,empty,empty,empty"


def test_unreadable_import_keeps_plates(session, tmp_path):
    session.select({"A1"})
    session.apply_bulk("keep")
    path = tmp_path / "latin1.csv"
    path.write_bytes(("Block 1\nA,Stämm\n").encode("latin-1"))
    with pytest.warns(PlateMetadataWarning, match="Could not import"):
        assert not session.import_file(path)
    with pytest.warns(PlateMetadataWarning):
        assert not session.import_file(tmp_path / "missing.csv")
    assert session.current_plate.metadata["A1"].base_strain == "keep"
    assert len(session.store) == 1


def test_unreadable_reference_keeps_previous_table(session, reference_csv, tmp_path):
    assert session.load_reference(reference_csv)
    table = session.reference
    path = tmp_path / "latin1_ref.csv"
    path.write_bytes("title\nStrain_Name,Construct_1\nSä,x\n".encode("latin-1"))
    with pytest.warns(PlateMetadataWarning, match="Could not load reference table"):
        assert not session.load_reference(path)
    with pytest.warns(PlateMetadataWarning):
        assert not session.load_reference(tmp_path / "missing.csv")
    assert session.reference is table
