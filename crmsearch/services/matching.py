"""Mapping free-text provider services onto the service taxonomy."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

from rapidfuzz import fuzz, utils

from crmsearch.services.canon import TaxonomyService
from crmsearch.shared.config import SearchConfig

MATCH_TYPES = ("exact", "high", "medium", "low", "none")


@dataclass
class ProviderService:
    service: str
    provider_count: int


@dataclass
class ServiceMatch:
    provider_service: str
    provider_count: int
    taxonomy_service: str
    taxonomy_category: str
    score: int
    match_type: str


def split_services(value: Any) -> List[str]:
    """Services are stored either as a ``,``/``;`` separated string or a list."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(s).strip() for s in value if str(s).strip()]
    parts = re.split(r"[,;]", str(value))
    return [p.strip() for p in parts if p.strip()]


def count_services(records: Iterable[Any], column: str = "services") -> List[ProviderService]:
    """Distinct provider services, most common first (ties by first appearance)."""
    counts: Counter[str] = Counter()
    for r in records:
        value = r.get(column) if isinstance(r, dict) else None
        for s in split_services(value):
            counts[s] += 1
    return [ProviderService(service=s, provider_count=n) for s, n in counts.most_common()]


def classify(score: int, config: SearchConfig) -> str:
    if score >= config.exact_threshold:
        return "exact"
    if score >= config.high_threshold:
        return "high"
    if score >= config.medium_threshold:
        return "medium"
    if score >= config.low_threshold:
        return "low"
    return "none"


def best_taxonomy_match(service: ProviderService,
                        taxonomy: Sequence[TaxonomyService],
                        config: SearchConfig) -> ServiceMatch:
    best = ServiceMatch(
        provider_service=service.service,
        provider_count=service.provider_count,
        taxonomy_service="",
        taxonomy_category="",
        score=0,
        match_type="none",
    )
    for entry in taxonomy:
        # default_process folds case and turns punctuation such as "-" into spaces
        score = int(round(fuzz.token_set_ratio(service.service, entry.service, processor=utils.default_process)))
        if score > best.score:
            best = ServiceMatch(
                provider_service=service.service,
                provider_count=service.provider_count,
                taxonomy_service=entry.service,
                taxonomy_category=entry.category,
                score=score,
                match_type=classify(score, config),
            )
    return best


def match_services(services: Sequence[ProviderService],
                   taxonomy: Sequence[TaxonomyService],
                   config: SearchConfig) -> List[ServiceMatch]:
    return [best_taxonomy_match(s, taxonomy, config) for s in services]


def summarize(matches: Iterable[ServiceMatch]) -> Counter[str]:
    counts: Counter[str] = Counter({t: 0 for t in MATCH_TYPES})
    for m in matches:
        counts[m.match_type] += 1
    return counts
