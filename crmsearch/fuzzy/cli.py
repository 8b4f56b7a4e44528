"""CLI for batch fuzzy filtering."""

from __future__ import annotations

import argparse
import os
from typing import List

from crmsearch.fuzzy.io import process_records
from crmsearch.shared.config import load_config


def parse_args(argv: List[str] | None = None):
    parser = argparse.ArgumentParser(description="Fuzzy-filter a CSV or JSON record export by a search query.")
    parser.add_argument("input", type=str, help="Path to a CSV export or a JSON list of records.")
    parser.add_argument("--query", "-q", type=str, required=True, help="Search text (empty keeps every record).")
    parser.add_argument(
        "--fields",
        type=str,
        default=None,
        help="Comma-separated field paths, dot notation for nested fields (default: from config).",
    )
    parser.add_argument("--threshold", type=int, default=None, help="Minimum score 0-100 (default: from config).")
    parser.add_argument("--format", type=str, choices=["csv", "json"], default=None, help="Input format (default: by extension).")
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
        fields = [p.strip() for p in args.fields.split(",") if p.strip()] if args.fields else config.fields
        threshold = args.threshold if args.threshold is not None else config.threshold
        process_records(
            inp,
            args.query,
            fields,
            threshold,
            fmt=args.format,
            out_path=args.out,
            out_dir=args.out_dir,
        )
        return 0
    except (OSError, ValueError) as e:
        print(f"error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
