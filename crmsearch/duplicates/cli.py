"""CLI for duplicate provider detection."""

from __future__ import annotations

import argparse
import csv
import os
from typing import List, Optional

from crmsearch.duplicates.scan import DuplicateScan, scan_for_duplicates
from crmsearch.fuzzy.fields import extract_field
from crmsearch.fuzzy.io import output_path, read_records
from crmsearch.shared.config import load_config
from crmsearch.shared.log import status


def write_groups(scan: DuplicateScan, out_path: str, fields: List[str]) -> None:
    with open(out_path, "w", newline="", encoding="utf-8") as f_out:
        w = csv.writer(f_out)
        w.writerow(["group", "match_type", "match_value", "similarity"] + fields)
        for n, group in enumerate(scan.groups, start=1):
            sim = "" if group.similarity is None else group.similarity
            for record in group.records:
                w.writerow([n, group.match_type, group.match_value, sim] + [extract_field(record, f) for f in fields])


def process_duplicates(inp_path: str,
                       name_threshold: int,
                       out_path: Optional[str] = None,
                       out_dir: Optional[str] = None) -> str:
    records = read_records(inp_path)
    scan = scan_for_duplicates(records, name_threshold=name_threshold)
    out_path = output_path(inp_path, "duplicates", out_path=out_path, out_dir=out_dir)
    write_groups(scan, out_path, ["id", "name", "email", "nif"])

    status("summary", f"scanned={scan.scanned} groups={len(scan.groups)} duplicates={scan.total_duplicates}")
    status("ok", f"wrote: {out_path}")
    return out_path


def parse_args(argv: List[str] | None = None):
    parser = argparse.ArgumentParser(description="Find probable duplicate providers by email, NIF and fuzzy name.")
    parser.add_argument("input", type=str, help="Provider export (CSV or JSON).")
    parser.add_argument(
        "--name-threshold",
        type=int,
        default=None,
        help="Minimum name similarity 0-100 (default: from config).",
    )
    parser.add_argument("--config", type=str, default=None, help="YAML config path (optional).")
    parser.add_argument("--out", type=str, default=None, help="Output CSV path.")
    parser.add_argument("--out-dir", type=str, default=None, help="Output directory for CSV.")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    inp = args.input
    if not os.path.isfile(inp):
        print(f"error: not a file: {inp}")
        return 2
    try:
        config = load_config(args.config)
        threshold = args.name_threshold if args.name_threshold is not None else config.duplicate_name_threshold
        process_duplicates(inp, threshold, out_path=args.out, out_dir=args.out_dir)
        return 0
    except (OSError, ValueError) as e:
        print(f"error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
