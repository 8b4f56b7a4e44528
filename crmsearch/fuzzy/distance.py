"""Edit distance."""

from __future__ import annotations


def levenshtein(a: str, b: str) -> int:
    """Levenshtein distance with unit costs, keeping two rows of min(len) + 1 cells."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    prev = list(range(len(b) + 1))
    curr = [0] * (len(b) + 1)
    for i in range(1, len(a) + 1):
        curr[0] = i
        ca = a[i - 1]
        for j in range(1, len(b) + 1):
            if ca == b[j - 1]:
                curr[j] = prev[j - 1]
            else:
                curr[j] = 1 + min(prev[j], curr[j - 1], prev[j - 1])
        prev, curr = curr, prev
    return prev[len(b)]


def distance_similarity(a: str, b: str) -> int:
    """Convert the edit distance of ``a`` and ``b`` to a 0-100 percentage.

    Rounds half up, in integer arithmetic. Two empty strings are identical (100).
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100
    d = levenshtein(a, b)
    return (200 * (max_len - d) + max_len) // (2 * max_len)
