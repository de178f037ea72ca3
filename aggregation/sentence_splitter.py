"""Split free text into sentence-sized claim candidates."""

import re
from collections.abc import Iterator

DEFAULT_MIN_CLAIM_CHARS = 20

_CRLF = re.compile(r"\r\n?")
_BLANK_LINES = re.compile(r"\n\s*\n+")
_NEWLINES = re.compile(r"\s*\n\s*")
# A boundary is .?! then whitespace, followed by a capital (any script), digit or quote.
_GAP = re.compile(r"(?<=[.?!])\s+(?=\S)")
_OPENING_QUOTES = "\"'“”‘’„«"
_CITATION_MARKER = re.compile(r"\s*\[[A-Za-z]?\d+\]")
_WHITESPACE = re.compile(r"\s+")

_QUOTE_MAP = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‘": "'",
        "’": "'",
        "‚": "'",
        "—": "-",
        "–": "-",
    }
)


def flatten_text(text: str) -> str:
    """Collapse CR/LF and blank-line runs, then flatten newlines to spaces."""
    text = _CRLF.sub("\n", text or "")
    text = _BLANK_LINES.sub("\n", text)
    return _NEWLINES.sub(" ", text).strip()


def _starts_sentence(ch: str) -> bool:
    return ch.isupper() or ch.isdigit() or ch in _OPENING_QUOTES


def split_candidates(flat: str) -> Iterator[str]:
    """Yield raw sentence candidates from already-flattened text."""
    start = 0
    for gap in _GAP.finditer(flat):
        if _starts_sentence(flat[gap.end()]):
            yield flat[start : gap.start()]
            start = gap.end()
    yield flat[start:]


def normalize_claim(text: str) -> str:
    """
    Normalize one candidate: straight quotes, hyphens for dashes, no
    bracketed citation markers like [S1] or [12], single spaces.
    """
    text = (text or "").translate(_QUOTE_MAP)
    text = _CITATION_MARKER.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


class SentenceSequence:
    """
    Lazy, restartable sequence of normalized sentences from one text.

    Every iteration re-scans the text, so the sequence can be consumed
    any number of times with identical results.
    """

    def __init__(self, text: str, min_chars: int = DEFAULT_MIN_CLAIM_CHARS):
        self._text = text or ""
        self._min_chars = min_chars

    def __iter__(self) -> Iterator[str]:
        flat = flatten_text(self._text)
        if not flat:
            return
        for candidate in split_candidates(flat):
            normalized = normalize_claim(candidate)
            if len(normalized) >= self._min_chars:
                yield normalized

    def __repr__(self) -> str:
        return f"SentenceSequence(chars={len(self._text)}, min_chars={self._min_chars})"


def split_sentences(text: str, min_chars: int = DEFAULT_MIN_CLAIM_CHARS) -> SentenceSequence:
    return SentenceSequence(text, min_chars=min_chars)
