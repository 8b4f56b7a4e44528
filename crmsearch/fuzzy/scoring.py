"""Scoring logic for fuzzy record search."""

from __future__ import annotations

from crmsearch.fuzzy.distance import distance_similarity
from crmsearch.fuzzy.normalize import normalize_text, tokenize

DEFAULT_THRESHOLD = 40

SCORE_EXACT = 100
SCORE_PREFIX = 95
SCORE_SUBSTRING = 85
SCORE_ALL_WORDS = 80


def _all_words_found(candidate_words: list[str], query_words: list[str]) -> bool:
    return all(
        any(cw in qw or qw in cw for cw in candidate_words)
        for qw in query_words
    )


def similarity(candidate: str, query: str) -> int:
    """Score how well ``candidate`` matches ``query`` on a 0-100 scale.

    Rules are tried in order and the first that applies wins:

    * identical after normalization: 100
    * either side empty: 0
    * one is a prefix of the other: 95
    * one contains the other: 85
    * multi-word query whose every word overlaps some candidate word: 80
    * otherwise the edit-distance percentage

    The fixed constants are not blended with the edit-distance signal, so a
    substring hit always outranks a near-miss spelling.
    """
    s1 = normalize_text(candidate)
    s2 = normalize_text(query)

    if s1 == s2:
        return SCORE_EXACT
    if not s1 or not s2:
        return 0

    if s2 in s1 or s1 in s2:
        if s1.startswith(s2) or s2.startswith(s1):
            return SCORE_PREFIX
        return SCORE_SUBSTRING

    query_words = tokenize(s2)
    if len(query_words) > 1 and _all_words_found(tokenize(s1), query_words):
        return SCORE_ALL_WORDS

    return distance_similarity(s1, s2)


def fuzzy_match(target: str, search: str, threshold: int = DEFAULT_THRESHOLD) -> bool:
    """True when ``target`` scores at least ``threshold`` against ``search``.

    A blank search matches everything; an empty target matches nothing else.
    """
    if not search or not search.strip():
        return True
    if not target:
        return False
    return similarity(target, search) >= threshold
