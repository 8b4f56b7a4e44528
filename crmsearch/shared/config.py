"""Search configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from crmsearch.shared.paths import LOCAL_CONFIG_NAME, default_config_path

ENV_THRESHOLD = "CRMSEARCH_THRESHOLD"
ENV_DEBOUNCE_MS = "CRMSEARCH_DEBOUNCE_MS"


@dataclass(frozen=True)
class SearchConfig:
    """Presentation-tuning constants for search and matching.

    None of these are derived from a measured property; deployments are
    expected to override them.
    """

    threshold: int = 40
    debounce_ms: int = 150
    fields: List[str] = field(default_factory=lambda: ["name", "email", "nif"])
    exact_threshold: int = 100
    high_threshold: int = 85
    medium_threshold: int = 70
    low_threshold: int = 60
    duplicate_name_threshold: int = 85


_INT_KEYS = {
    "threshold",
    "debounce_ms",
    "exact_threshold",
    "high_threshold",
    "medium_threshold",
    "low_threshold",
    "duplicate_name_threshold",
}


def _candidate_config_paths(config_path: str | None) -> List[Path]:
    candidates: List[Path] = []
    if config_path:
        candidates.append(Path(config_path))
    candidates.append(Path(os.getcwd()) / LOCAL_CONFIG_NAME)
    candidates.append(default_config_path())
    return candidates


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"config key {key!r} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"config key {key!r} must be an integer, got {value!r}") from None


def config_from_mapping(data: Dict[str, Any]) -> SearchConfig:
    """Build a config from a parsed mapping, ignoring unknown keys."""
    known = {f.name for f in fields(SearchConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in (data or {}).items():
        if key not in known:
            continue
        if key in _INT_KEYS:
            kwargs[key] = _coerce_int(key, value)
        elif key == "fields":
            if isinstance(value, str):
                value = [p.strip() for p in value.split(",")]
            if not isinstance(value, list):
                raise ValueError(f"config key 'fields' must be a list, got {value!r}")
            kwargs[key] = [str(p) for p in value if str(p)]
    return SearchConfig(**kwargs)


def apply_env_overrides(config: SearchConfig, environ: Optional[Dict[str, str]] = None) -> SearchConfig:
    env = os.environ if environ is None else environ
    overrides: Dict[str, int] = {}
    if env.get(ENV_THRESHOLD, "").strip():
        overrides["threshold"] = _coerce_int(ENV_THRESHOLD, env[ENV_THRESHOLD].strip())
    if env.get(ENV_DEBOUNCE_MS, "").strip():
        overrides["debounce_ms"] = _coerce_int(ENV_DEBOUNCE_MS, env[ENV_DEBOUNCE_MS].strip())
    return replace(config, **overrides) if overrides else config


def load_config(config_path: str | None = None, environ: Optional[Dict[str, str]] = None) -> SearchConfig:
    """Load the first readable config file, then apply environment overrides.

    An explicit ``config_path`` that does not exist is an error; the
    working-directory and bundled files are optional.
    """
    if config_path and not Path(config_path).is_file():
        raise ValueError(f"config file not found: {config_path}")

    data: Dict[str, Any] = {}
    for path in _candidate_config_paths(config_path):
        if not path.is_file():
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"invalid YAML in {path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"config {path} must be a mapping")
        data = loaded
        break

    return apply_env_overrides(config_from_mapping(data), environ)
