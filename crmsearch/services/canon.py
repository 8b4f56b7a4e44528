"""Service taxonomy loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

import yaml

from crmsearch.shared.paths import DEFAULT_TAXONOMY_NAME, default_taxonomy_path


@dataclass(frozen=True)
class TaxonomyService:
    category: str
    service: str


def _candidate_yaml_paths(yaml_path: str | None) -> List[str]:
    candidates: List[str] = []
    if yaml_path:
        candidates.append(yaml_path)

    candidates.append(os.path.join(os.getcwd(), DEFAULT_TAXONOMY_NAME))
    candidates.append(os.path.join(os.getcwd(), "data", DEFAULT_TAXONOMY_NAME))
    candidates.append(str(default_taxonomy_path()))

    seen = set()
    out = []
    for p in candidates:
        if p and p not in seen:
            seen.add(p)
            out.append(p)
    return out


def _service_names(body: object) -> List[str]:
    if isinstance(body, dict):
        body = body.get("services", [])
    if not isinstance(body, list):
        return []
    return [nm.strip() for nm in body if isinstance(nm, str) and nm.strip()]


def load_taxonomy(yaml_path: str | None = None) -> List[TaxonomyService]:
    """Load ``categories: {category: [service, ...]}`` from the first readable YAML.

    Categories may also be written as ``{category: {services: [...]}}``.
    Entries keep file order; a service listed twice under one category is kept once.
    """
    if yaml_path and not Path(yaml_path).is_file():
        raise ValueError(f"taxonomy file not found: {yaml_path}")

    cfg = None
    tried = []
    for p in _candidate_yaml_paths(yaml_path):
        if not os.path.isfile(p):
            continue
        tried.append(p)
        try:
            with open(p, "r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"failed to read taxonomy yaml {p}: {e}") from e
        break
    if cfg is None:
        raise ValueError("no taxonomy yaml found")
    if not isinstance(cfg, dict):
        raise ValueError(f"taxonomy yaml must be a mapping: {tried[-1]}")

    cats = cfg.get("categories", {}) or {}
    if not isinstance(cats, dict):
        raise ValueError(f"'categories' must be a mapping in {tried[-1]}")

    out: List[TaxonomyService] = []
    seen = set()
    for category, body in cats.items():
        for name in _service_names(body):
            key = (str(category), name)
            if key in seen:
                continue
            seen.add(key)
            out.append(TaxonomyService(category=str(category), service=name))
    if not out:
        raise ValueError(f"no services found under 'categories' in {tried[-1]}")
    return out
