"""Fuzzy text matching over in-memory record collections."""

from crmsearch.fuzzy.controller import SearchController, SearchState
from crmsearch.fuzzy.distance import levenshtein
from crmsearch.fuzzy.fields import extract_field
from crmsearch.fuzzy.normalize import normalize_text
from crmsearch.fuzzy.rank import MatchResult, fuzzy_filter, rank
from crmsearch.fuzzy.scoring import DEFAULT_THRESHOLD, fuzzy_match, similarity
from crmsearch.fuzzy.timers import AsyncioScheduler, Scheduler, ThreadingScheduler

__all__ = [
    "AsyncioScheduler",
    "DEFAULT_THRESHOLD",
    "MatchResult",
    "Scheduler",
    "SearchController",
    "SearchState",
    "ThreadingScheduler",
    "extract_field",
    "fuzzy_filter",
    "fuzzy_match",
    "levenshtein",
    "normalize_text",
    "rank",
    "similarity",
]
