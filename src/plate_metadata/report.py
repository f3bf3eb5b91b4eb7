"""
report.py
---------
Per-plate metadata report: one page per metadata field showing the 8x12 plate
coloured by value, one PDF per plate, all PDFs packed into a zip archive.

``BatchReportTask`` drives the session through every (plate, field) pair in
order. For each pair it switches the active plate and displayed field, yields
once so a rendering surface can redraw, then captures the page through the
``render`` callback.
"""

from __future__ import annotations

import io
import warnings
import zipfile
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.colors import to_rgb

from plate_metadata.errors import InvalidOperation, PlateMetadataWarning
from plate_metadata.palette import color_for_value
from plate_metadata.plate_store import Plate
from plate_metadata.session import Session
from plate_metadata.well_grid import COLUMNS, METADATA_FIELDS, ROW_LABELS

Renderer = Callable[[Plate, str], Optional[object]]


class BatchReportTask:
    def __init__(self, session: Session, render: Renderer):
        self.session = session
        self.render = render
        self.pages: Dict[int, List[Tuple[str, object]]] = {}

    def steps(self) -> Iterator[Tuple[int, str]]:
        session = self.session
        if session.batch_running:
            raise InvalidOperation("A report batch is already running.")
        session.batch_running = True
        restore = (session.current_index, session.displayed_field)
        try:
            for index in range(len(session.store)):
                session.current_index = index
                for field in METADATA_FIELDS:
                    session.set_displayed_field(field)
                    yield index, field
                    plate = session.current_plate
                    artifact = self.render(plate, field)
                    if artifact is None:
                        warnings.warn(
                            f"Nothing rendered for plate {plate.id} - {field}; page skipped",
                            PlateMetadataWarning,
                        )
                        continue
                    self.pages.setdefault(plate.id, []).append((field, artifact))
        finally:
            session.current_index, session.displayed_field = restore
            session.batch_running = False

    def run(self) -> Dict[int, List[Tuple[str, object]]]:
        for _ in self.steps():
            pass
        return self.pages


def render_plate_map(plate: Plate, field: str) -> matplotlib.figure.Figure:
    """Draw the plate with each well coloured and labelled by ``field``."""
    values = [[getattr(plate.metadata[f"{r}{c}"], field) for c in COLUMNS] for r in ROW_LABELS]
    grid = np.array([[to_rgb(color_for_value(v)) for v in row] for row in values])

    fig, ax = plt.subplots(figsize=(len(COLUMNS) * 0.9, len(ROW_LABELS) * 0.7))
    ax.imshow(grid, origin="upper", aspect="auto")
    for i, row in enumerate(values):
        for j, val in enumerate(row):
            ax.text(j, i, val or "-", ha="center", va="center", fontsize=6, wrap=True)
    ax.set_xticks(range(len(COLUMNS)))
    ax.set_xticklabels(COLUMNS)
    ax.set_yticks(range(len(ROW_LABELS)))
    ax.set_yticklabels(ROW_LABELS)
    ax.set_xticks(np.arange(-0.5, len(COLUMNS)), minor=True)
    ax.set_yticks(np.arange(-0.5, len(ROW_LABELS)), minor=True)
    ax.grid(which="minor", color="white", linewidth=1.5)
    ax.tick_params(which="minor", length=0)
    ax.set_title(f"Plate {plate.id} - {field}")
    fig.tight_layout()
    return fig


def write_report_archive(session: Session, path: Union[str, Path]) -> Path:
    """Write ``plate_<id>_metadata.pdf`` for every plate into a zip at ``path``."""
    path = Path(path)
    buffers: Dict[int, io.BytesIO] = {}
    pdfs: Dict[int, PdfPages] = {}

    def render(plate: Plate, field: str) -> str:
        if plate.id not in pdfs:
            buffers[plate.id] = io.BytesIO()
            pdfs[plate.id] = PdfPages(buffers[plate.id])
        fig = render_plate_map(plate, field)
        pdfs[plate.id].savefig(fig)
        plt.close(fig)
        return field

    try:
        BatchReportTask(session, render).run()
    finally:
        for pdf in pdfs.values():
            pdf.close()

    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for plate_id, buf in buffers.items():
            zf.writestr(f"plate_{plate_id}_metadata.pdf", buf.getvalue())
    return path
