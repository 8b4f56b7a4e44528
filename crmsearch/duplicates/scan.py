"""Duplicate provider detection."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from crmsearch.fuzzy.distance import distance_similarity
from crmsearch.fuzzy.fields import extract_field
from crmsearch.fuzzy.normalize import normalize_text

DEFAULT_NAME_THRESHOLD = 85

_MASKED = re.compile(r"^\*+$")


@dataclass
class DuplicateGroup:
    match_type: str
    match_value: str
    records: List[Any]
    similarity: Optional[int] = None


@dataclass
class DuplicateScan:
    groups: List[DuplicateGroup] = field(default_factory=list)
    scanned: int = 0

    @property
    def total_duplicates(self) -> int:
        """Records that would disappear if every group were merged into one."""
        return sum(len(g.records) - 1 for g in self.groups)


def is_masked(value: str) -> bool:
    """Anonymized (archived) records carry values made only of asterisks."""
    return bool(_MASKED.match(value.strip())) if value else False


def _exact_groups(records: Sequence[Any],
                  taken: set[int],
                  match_type: str,
                  key: Callable[[Any], str]) -> List[DuplicateGroup]:
    buckets: Dict[str, List[int]] = {}
    for i, r in enumerate(records):
        if i in taken:
            continue
        value = key(r)
        if not value or is_masked(value):
            continue
        buckets.setdefault(value, []).append(i)

    groups: List[DuplicateGroup] = []
    for value, idxs in buckets.items():
        if len(idxs) > 1:
            groups.append(DuplicateGroup(match_type, value, [records[i] for i in idxs]))
            taken.update(idxs)
    return groups


def _usable_name(value: str) -> bool:
    return bool(value.strip()) and not is_masked(value)


def _name_groups(records: Sequence[Any],
                 taken: set[int],
                 name_field: str,
                 threshold: int) -> List[DuplicateGroup]:
    remaining = [
        i for i in range(len(records))
        if i not in taken and _usable_name(extract_field(records[i], name_field))
    ]
    names = {i: normalize_text(extract_field(records[i], name_field)) for i in remaining}

    groups: List[DuplicateGroup] = []
    for pos, i in enumerate(remaining):
        if i in taken:
            continue
        members = [i]
        min_sim = 100
        for j in remaining[pos + 1:]:
            if j in taken:
                continue
            sim = distance_similarity(names[i], names[j])
            if sim >= threshold:
                members.append(j)
                min_sim = min(min_sim, sim)
                taken.add(j)
        if len(members) > 1:
            taken.add(i)
            groups.append(DuplicateGroup(
                "name",
                extract_field(records[i], name_field),
                [records[k] for k in members],
                similarity=min_sim,
            ))
    return groups


def scan_for_duplicates(records: Sequence[Any],
                        email_field: str = "email",
                        nif_field: str = "nif",
                        name_field: str = "name",
                        name_threshold: int = DEFAULT_NAME_THRESHOLD) -> DuplicateScan:
    """
    Group probable duplicate providers.

    Detection order: email (exact, case-insensitive), then NIF (exact) among
    records not yet grouped, then name (edit-distance similarity of
    normalized names >= ``name_threshold``) among what is left. A record
    belongs to at most one group. Records are never mutated.
    """
    taken: set[int] = set()
    groups: List[DuplicateGroup] = []
    groups += _exact_groups(records, taken, "email", lambda r: extract_field(r, email_field).strip().lower())
    groups += _exact_groups(records, taken, "nif", lambda r: extract_field(r, nif_field).strip())
    groups += _name_groups(records, taken, name_field, name_threshold)
    return DuplicateScan(groups=groups, scanned=len(records))
