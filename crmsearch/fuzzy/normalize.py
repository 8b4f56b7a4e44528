"""Normalization helpers for fuzzy matching."""

from __future__ import annotations

import re
import unicodedata
from typing import List

# Combining Diacritical Marks block (U+0300..U+036F).
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def normalize_text(text: str) -> str:
    """Lower-case, strip accents and trim, so "José " compares equal to "jose"."""
    if not text:
        return ""
    s = unicodedata.normalize("NFD", text.lower())
    s = _COMBINING_MARKS.sub("", s)
    return s.strip()


def tokenize(text: str) -> List[str]:
    """Split already-normalized text on runs of whitespace."""
    return text.split() if text else []
