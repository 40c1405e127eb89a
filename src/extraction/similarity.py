from __future__ import annotations

import re
from typing import FrozenSet, List

_LETTER_RUN_RE = re.compile(r"[^\W\d_]+")


def words(text: str) -> List[str]:
    """Lowercased runs of letters; digits and punctuation separate words."""
    return _LETTER_RUN_RE.findall(text.lower())


def word_set(text: str) -> FrozenSet[str]:
    return frozenset(words(text))


def jaccard_similarity(a: str, b: str) -> float:
    set_a, set_b = word_set(a), word_set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)
