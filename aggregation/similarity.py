"""Token-set similarity between two claims."""

import re

_NON_WORD = re.compile(r"\W+")


def tokenize(text: str) -> set[str]:
    """Lower-case ``text`` and split it into a set of unique word tokens."""
    return {tok for tok in _NON_WORD.split((text or "").lower()) if tok}


def jaccard(a: set[str], b: set[str]) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def similarity(a: str, b: str) -> float:
    """
    Jaccard coefficient of the two token sets, in [0, 1].

    Order and repetition do not matter. Two texts with no tokens at all
    score 0.
    """
    return jaccard(tokenize(a), tokenize(b))
