"""Threshold filtering and ranking of record collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Sequence, TypeVar

from crmsearch.fuzzy.fields import extract_field
from crmsearch.fuzzy.scoring import DEFAULT_THRESHOLD, SCORE_EXACT, similarity

T = TypeVar("T")


@dataclass(frozen=True)
class MatchResult(Generic[T]):
    item: T
    score: int
    matched_field: str


def identity_results(items: Iterable[T]) -> List[MatchResult[T]]:
    """Every item at score 100, in input order: the "no active search" view."""
    return [MatchResult(item=item, score=SCORE_EXACT, matched_field="") for item in items]


def best_field(item: Any, query: str, field_paths: Sequence[str]) -> tuple[int, str]:
    """Best score over ``field_paths`` and the first path that reached it.

    Empty field values are skipped. When no field scores above zero the
    matched path is ``""``.
    """
    best_score = 0
    best_path = ""
    for path in field_paths:
        value = extract_field(item, path)
        if not value:
            continue
        score = similarity(value, query)
        if score > best_score:
            best_score = score
            best_path = path
    return best_score, best_path


def rank(items: Iterable[T],
         query: str,
         field_paths: Sequence[str],
         threshold: int = DEFAULT_THRESHOLD) -> List[MatchResult[T]]:
    """Score, filter and order ``items`` against ``query``.

    Pure and synchronous; items are never mutated. Items scoring below
    ``threshold`` are dropped and the rest sorted by score descending, ties
    keeping input order. A blank query returns :func:`identity_results`.
    """
    if not query or not query.strip():
        return identity_results(items)

    results: List[MatchResult[T]] = []
    for item in items:
        score, path = best_field(item, query, field_paths)
        if score >= threshold:
            results.append(MatchResult(item=item, score=score, matched_field=path))

    # list.sort is stable
    results.sort(key=lambda r: -r.score)
    return results


def fuzzy_filter(items: Iterable[T],
                 query: str,
                 field_paths: Sequence[str],
                 threshold: int = DEFAULT_THRESHOLD) -> List[MatchResult[T]]:
    """One-off, non-debounced filtering for call sites outside a search box."""
    return rank(items, query, field_paths, threshold)
