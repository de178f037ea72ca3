"""Coerce parsed synthesis output into a well-formed Summary."""

import math
from collections.abc import Sequence
from typing import Any

from config.config import AggregationSettings
from models.summary import Summary, SummarySentence
from tools.web.contracts import RetrievalSource

EMPTY_ANSWER = "(No answer returned.)"


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("\r\n", "\n").strip()


def clamp_confidence(value: Any) -> int:
    """Round into [0, 100]; anything non-numeric or non-finite becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, min(100, value))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(round(max(0.0, min(100.0, number))))


def clean_citations(raw: Any, valid_ids: set[int]) -> tuple[int, ...]:
    """
    Keep finite integral ids that exist in ``valid_ids``, first-seen order,
    no duplicates.
    """
    if not isinstance(raw, list):
        return ()
    out: list[int] = []
    for item in raw:
        if isinstance(item, bool):
            continue
        if isinstance(item, int):
            if item in valid_ids and item not in out:
                out.append(item)
            continue
        try:
            number = float(item)
        except (TypeError, ValueError, OverflowError):
            continue
        if not math.isfinite(number) or number != int(number):
            continue
        cid = int(number)
        if cid in valid_ids and cid not in out:
            out.append(cid)
    return tuple(out)


def clean_string_list(raw: Any, limit: int) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    out: list[str] = []
    seen: set[str] = set()
    for item in raw:
        text = clean_text(item)
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        out.append(text)
        if len(out) >= limit:
            break
    return tuple(out)


def normalize_summary(
    parsed: dict[str, Any],
    sources: Sequence[RetrievalSource],
    settings: AggregationSettings,
) -> Summary:
    """
    Build a Summary from the model's JSON object.

    Sources always come from ``sources`` (the run input). Anything the model
    says about sources is ignored and citations to unknown ids are dropped.
    """
    valid_ids = {s.id for s in sources}

    sentences: list[SummarySentence] = []
    raw_sentences = parsed.get("sentences")
    if isinstance(raw_sentences, list):
        for item in raw_sentences:
            if not isinstance(item, dict):
                continue
            text = clean_text(item.get("text"))
            if not text:
                continue
            sentences.append(
                SummarySentence(
                    text=text,
                    citations=clean_citations(item.get("citations"), valid_ids),
                    confidence=clamp_confidence(item.get("confidence", 0)),
                )
            )
            if len(sentences) >= settings.max_sentences:
                break

    return Summary(
        final_answer=clean_text(parsed.get("finalAnswer")) or EMPTY_ANSWER,
        key_facts=clean_string_list(parsed.get("keyFacts"), settings.max_key_facts),
        sentences=tuple(sentences),
        disagreements=clean_string_list(parsed.get("disagreements"), settings.max_disagreements),
        sources=tuple(sources),
        strategy="delegated",
    )
