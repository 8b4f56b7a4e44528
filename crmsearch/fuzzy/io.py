"""CSV/JSON I/O for batch fuzzy filtering."""

from __future__ import annotations

import csv
import json
import os
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from crmsearch.fuzzy.rank import MatchResult, fuzzy_filter
from crmsearch.shared.log import status


def norm_header(h: str) -> str:
    if h is None:
        return ""
    h = h.lstrip("\ufeff").strip().lower()
    h = h.replace("-", "_").replace(" ", "_")
    h = re.sub(r"_+", "_", h)
    return h


def read_csv_records(path: str) -> List[Dict[str, str]]:
    """Read CSV rows as dicts keyed by normalized header names."""
    with open(path, "r", newline="", encoding="utf-8") as f:
        rdr = csv.reader(f)
        header = next(rdr, None)
        if not header:
            raise ValueError(f"empty CSV (no header): {path}")
        keys = [norm_header(h) for h in header]
        records: List[Dict[str, str]] = []
        for row in rdr:
            if not any(cell.strip() for cell in row):
                continue
            records.append({k: (row[i] if i < len(row) else "") for i, k in enumerate(keys) if k})
        return records


def read_json_records(path: str) -> List[Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON in {path}: {e}") from e
    if isinstance(data, dict):
        # Accept {"data": [...]} envelopes as returned by the list endpoints.
        data = data.get("data", data.get("items"))
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON list of records in {path}")
    return data


def read_records(path: str, fmt: Optional[str] = None) -> List[Any]:
    fmt = (fmt or os.path.splitext(path)[1].lstrip(".")).lower()
    if fmt == "csv":
        return read_csv_records(path)
    if fmt == "json":
        return read_json_records(path)
    raise ValueError(f"unsupported input format: {fmt or '<none>'} (expected csv or json)")


def output_path(inp: str, suffix: str, out_path: Optional[str] = None, out_dir: Optional[str] = None) -> str:
    if out_path:
        return out_path
    in_filename = os.path.splitext(os.path.basename(inp))[0]
    out_filename = f"{in_filename}.{suffix}.csv"
    if out_dir:
        return os.path.join(out_dir, out_filename)
    return os.path.join(os.path.dirname(os.path.abspath(inp)), out_filename)


def flat_columns(records: Iterable[Any]) -> List[str]:
    """Union of top-level keys across mapping records, in first-seen order."""
    cols: List[str] = []
    seen = set()
    for r in records:
        if not isinstance(r, dict):
            continue
        for k in r:
            if k not in seen:
                seen.add(k)
                cols.append(str(k))
    return cols


def cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def write_results(results: Sequence[MatchResult[Any]], out_path: str) -> None:
    columns = flat_columns(r.item for r in results)
    with open(out_path, "w", newline="", encoding="utf-8") as f_out:
        w = csv.writer(f_out)
        w.writerow(["score", "matched_field"] + columns)
        for r in results:
            item = r.item if isinstance(r.item, dict) else {}
            w.writerow([r.score, r.matched_field] + [cell(item.get(c)) for c in columns])


def process_records(inp_path: str,
                    query: str,
                    fields: Sequence[str],
                    threshold: int,
                    fmt: Optional[str] = None,
                    out_path: Optional[str] = None,
                    out_dir: Optional[str] = None) -> str:
    if not fields:
        raise ValueError("no field paths given")
    records = read_records(inp_path, fmt)
    results = fuzzy_filter(records, query, fields, threshold)
    out_path = output_path(inp_path, "fuzzy_filtered", out_path=out_path, out_dir=out_dir)
    write_results(results, out_path)

    status("summary", f"records={len(records)} matched={len(results)} threshold={threshold}")
    status("ok", f"processed: {inp_path}")
    status("ok", f"wrote:      {out_path}")
    return out_path
