"""Path helpers for packaged resources."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_NAME = "search.yaml"
DEFAULT_TAXONOMY_NAME = "service_taxonomy.yaml"
LOCAL_CONFIG_NAME = "crmsearch.yaml"


def package_root() -> Path:
    return Path(__file__).resolve().parents[1]


def default_config_path() -> Path:
    return package_root() / "data" / DEFAULT_CONFIG_NAME


def default_taxonomy_path() -> Path:
    return package_root() / "data" / DEFAULT_TAXONOMY_NAME
