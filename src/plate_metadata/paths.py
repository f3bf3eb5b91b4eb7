from __future__ import annotations
from pathlib import Path

# src/plate_metadata -> src -> checkout root
PKG_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PKG_DIR.parents[1]

# plate CSVs and reference sheets are read from here unless --data-dir is given
DATA_DIR = (PROJECT_ROOT / "data").resolve()
# exported spots.csv, templates and report archives go here unless --output-dir is given
OUT_DIR = (PROJECT_ROOT / "outputs").resolve()


def ensure_dirs(out_dir: Path = OUT_DIR) -> None:
    """Create the export directory (and parents) before any file is written."""
    Path(out_dir).mkdir(parents=True, exist_ok=True)
