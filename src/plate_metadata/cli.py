#!/usr/bin/env python3
"""
cli.py

Command-line access to the plate metadata tools.

Usage examples
--------------

# Normalise either import layout to the canonical spots.csv
plate-metadata convert basestrain_wells.csv --out spots.csv

# Fill negsel/anchor/receptor from the plasmid sheet
plate-metadata join spots.csv np_plasmids.csv --out spots_joined.csv

# Blank (or pre-filled) base strain template with 3 plates
plate-metadata template --plates 3 --out basestrain_wells.csv

# One PDF per plate, one page per field, zipped
plate-metadata report spots.csv --out plate_metadata.zip
"""

from __future__ import annotations

import argparse
import warnings
from pathlib import Path
from typing import List, Optional

from plate_metadata.csv_export import serialize_layout, write_csv
from plate_metadata.errors import PlateMetadataWarning
from plate_metadata.paths import DATA_DIR, OUT_DIR, ensure_dirs
from plate_metadata.plate_store import PlateStore, new_plate
from plate_metadata.report import write_report_archive
from plate_metadata.session import SCOPE_ALL, Session


def _load_session(path: Path) -> Session:
    if not path.is_file():
        raise SystemExit(f"Input file not found: {path}")
    session = Session()
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", PlateMetadataWarning)
        ok = session.import_file(path)
    messages = [str(w.message) for w in caught]
    if not ok:
        raise SystemExit("; ".join(messages) or f"Could not import {path}")
    for msg in messages:
        print(f"Warning: {msg}")
    print(f"Loaded {len(session.store)} plate(s) from {path}")
    return session


def cmd_convert(args: argparse.Namespace, data_dir: Path, out_dir: Path) -> None:
    session = _load_session(data_dir / args.input)
    out = write_csv(out_dir / args.out, session.export_csv())
    print(f"Wrote metadata CSV to {out}")


def cmd_join(args: argparse.Namespace, data_dir: Path, out_dir: Path) -> None:
    session = _load_session(data_dir / args.input)
    ref_path = data_dir / args.reference
    if not ref_path.is_file():
        raise SystemExit(f"Reference file not found: {ref_path}")
    if not session.load_reference(ref_path):
        raise SystemExit(f"Could not load reference table from {ref_path}")
    report = session.search_strain(SCOPE_ALL)
    print(
        f"Matched {len(report.matched)} well(s), "
        f"{len(report.unmatched)} without reference row, "
        f"{len(report.skipped)} without base strain"
    )
    out = write_csv(out_dir / args.out, session.export_csv())
    print(f"Wrote metadata CSV to {out}")


def cmd_template(args: argparse.Namespace, data_dir: Path, out_dir: Path) -> None:
    if args.source:
        plates = _load_session(data_dir / args.source).store.all()
    else:
        if args.plates < 1:
            raise SystemExit("--plates must be at least 1")
        plates = PlateStore([new_plate(i + 1) for i in range(args.plates)]).all()
    out = write_csv(out_dir / args.out, serialize_layout(plates))
    print(f"Wrote base strain template to {out}")


def cmd_report(args: argparse.Namespace, data_dir: Path, out_dir: Path) -> None:
    session = _load_session(data_dir / args.input)
    out = write_report_archive(session, out_dir / args.out)
    print(f"Wrote plate reports to {out}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="96-well block metadata helper")
    ap.add_argument("--data-dir", default=str(DATA_DIR), help="Directory input files are read from")
    ap.add_argument("--output-dir", default=str(OUT_DIR), help="Directory output files are written to")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("convert", help="Import a metadata or layout CSV and write the canonical CSV")
    p.add_argument("input")
    p.add_argument("--out", default="spots.csv")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("join", help="Backfill negsel/anchor/receptor from a reference sheet")
    p.add_argument("input")
    p.add_argument("reference")
    p.add_argument("--out", default="spots.csv")
    p.set_defaults(func=cmd_join)

    p = sub.add_parser("template", help="Write a base strain layout template")
    p.add_argument("--plates", type=int, default=1, help="Number of blank plates")
    p.add_argument("--from", dest="source", help="Pre-fill the template from this file")
    p.add_argument("--out", default="basestrain_wells.csv")
    p.set_defaults(func=cmd_template)

    p = sub.add_parser("report", help="Write one PDF per plate into a zip archive")
    p.add_argument("input")
    p.add_argument("--out", default="plate_metadata.zip")
    p.set_defaults(func=cmd_report)
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    data_dir = Path(args.data_dir).resolve()
    out_dir = Path(args.output_dir).resolve()
    ensure_dirs(out_dir)
    args.func(args, data_dir, out_dir)


if __name__ == "__main__":
    main()
