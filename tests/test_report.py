"""Tests for the batch plate report."""
import zipfile

import pytest

from conftest import make_store
from plate_metadata.errors import InvalidOperation, PlateMetadataWarning
from plate_metadata.report import BatchReportTask, render_plate_map, write_report_archive
from plate_metadata.session import Session
from plate_metadata.well_grid import METADATA_FIELDS


def test_steps_visit_every_plate_and_field_in_order():
    session = Session(make_store(2))
    session.go_to(1)
    session.set_displayed_field("notes")
    seen = []

    def render(plate, field):
        assert session.current_plate == plate
        assert session.displayed_field == field
        return f"{plate.id}:{field}"

    task = BatchReportTask(session, render)
    for index, field in task.steps():
        seen.append((index, field))
        assert session.current_index == index
    assert seen == [(i, f) for i in range(2) for f in METADATA_FIELDS]
    assert [f for f, _ in task.pages[2]] == list(METADATA_FIELDS)
    # view state restored
    assert session.current_index == 1
    assert session.displayed_field == "notes"
    assert not session.batch_running


def test_missing_render_skips_page_with_warning():
    session = Session(make_store(1))
    task = BatchReportTask(session, lambda plate, field: None if field == "anchor" else field)
    with pytest.warns(PlateMetadataWarning, match="anchor"):
        pages = task.run()
    assert [f for f, _ in pages[1]] == [f for f in METADATA_FIELDS if f != "anchor"]


def test_second_batch_rejected_while_running():
    session = Session(make_store(1))
    first = BatchReportTask(session, lambda p, f: f).steps()
    next(first)
    with pytest.raises(InvalidOperation):
        next(BatchReportTask(session, lambda p, f: f).steps())
    first.close()
    assert not session.batch_running


def test_render_plate_map_title():
    import matplotlib.pyplot as plt

    fig = render_plate_map(make_store(1).get(0), "base_strain")
    assert fig.axes[0].get_title() == "Plate 1 - base_strain"
    plt.close(fig)


def test_write_report_archive(tmp_path):
    session = Session(make_store(2))
    path = write_report_archive(session, tmp_path / "plate_metadata.zip")
    with zipfile.ZipFile(path) as zf:
        names = sorted(zf.namelist())
        assert names == ["plate_1_metadata.pdf", "plate_2_metadata.pdf"]
        assert zf.read("plate_1_metadata.pdf").startswith(b"%PDF")
