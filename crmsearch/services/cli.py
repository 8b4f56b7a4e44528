"""CLI for service-taxonomy matching."""

from __future__ import annotations

import argparse
import csv
import os
from typing import List, Optional, Sequence

from crmsearch.fuzzy.io import norm_header, output_path, read_records
from crmsearch.services.canon import load_taxonomy
from crmsearch.services.matching import MATCH_TYPES, ServiceMatch, count_services, match_services, summarize
from crmsearch.shared.config import SearchConfig, load_config
from crmsearch.shared.log import status

OUT_HEADER = [
    "provider_service", "taxonomy_service", "taxonomy_category", "score", "match_type", "provider_count",
]


def write_matches(matches: Sequence[ServiceMatch], out_path: str) -> None:
    with open(out_path, "w", newline="", encoding="utf-8") as f_out:
        w = csv.writer(f_out)
        w.writerow(OUT_HEADER)
        for m in matches:
            w.writerow([
                m.provider_service,
                m.taxonomy_service,
                m.taxonomy_category,
                m.score,
                m.match_type,
                m.provider_count,
            ])


def process_services(inp_path: str,
                     config: SearchConfig,
                     yaml_path: Optional[str] = None,
                     column: str = "services",
                     out_path: Optional[str] = None,
                     out_dir: Optional[str] = None) -> str:
    taxonomy = load_taxonomy(yaml_path)
    records = read_records(inp_path)
    col = norm_header(column) if inp_path.lower().endswith(".csv") else column
    services = count_services(records, column=col)
    if not services:
        raise ValueError(f"no services found in column {column!r}")

    matches = match_services(services, taxonomy, config)
    out_path = output_path(inp_path, "service_matches", out_path=out_path, out_dir=out_dir)
    write_matches(matches, out_path)

    counts = summarize(matches)
    status("summary", f"taxonomy={len(taxonomy)} services={len(services)}")
    for t in MATCH_TYPES:
        status("summary", f"{t:<6} {counts[t]}")
    status("ok", f"wrote: {out_path}")
    return out_path


def parse_args(argv: List[str] | None = None):
    parser = argparse.ArgumentParser(description="Suggest service-taxonomy mappings for provider services.")
    parser.add_argument("input", type=str, help="Provider export (CSV or JSON) with a services column.")
    parser.add_argument(
        "--taxonomy",
        type=str,
        default=None,
        help="Taxonomy YAML path (optional). If omitted, uses the bundled crmsearch/data/service_taxonomy.yaml.",
    )
    parser.add_argument("--column", type=str, default="services", help="Column holding the provider services.")
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
        process_services(
            inp,
            load_config(args.config),
            yaml_path=args.taxonomy,
            column=args.column,
            out_path=args.out,
            out_dir=args.out_dir,
        )
        return 0
    except (OSError, ValueError) as e:
        print(f"error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
