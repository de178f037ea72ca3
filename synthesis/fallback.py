"""
Deterministic synthesis: a plain-text report assembled from the fact list
with no model call. Used when no synthesis credential is configured or the
delegated path fails.
"""

from collections.abc import Sequence

from aggregation.fact_aggregator import find_numeric_conflicts, split_consensus
from config.config import AggregationSettings
from models.fact import Fact
from models.provider_answer import ProviderAnswer
from models.summary import Summary, SummarySentence
from tools.web.contracts import RetrievalSource

NOTHING_TO_SUMMARIZE = "No provider returned usable text, so nothing could be summarized."


def _error_lines(answers: Sequence[ProviderAnswer]) -> list[str]:
    return [f"- {a.provider}: {a.error}" for a in answers if a.error]


def _confidence(fact: Fact, usable_count: int) -> int:
    if usable_count <= 0:
        return 0
    return min(100, round(100 * fact.corroboration / usable_count))


def build_fallback_summary(
    prompt: str,
    answers: Sequence[ProviderAnswer],
    facts: Sequence[Fact],
    sources: Sequence[RetrievalSource] = (),
    settings: AggregationSettings | None = None,
) -> Summary:
    settings = settings or AggregationSettings()
    usable_count = sum(1 for a in answers if a.has_usable_text)
    errors = _error_lines(answers)

    if usable_count == 0:
        lines = [f"Prompt: {prompt.strip()}", "", NOTHING_TO_SUMMARIZE]
        if errors:
            lines += ["", "Provider errors:", *errors]
        return Summary(final_answer="\n".join(lines), sources=tuple(sources))

    consensus, unique = split_consensus(
        facts, settings.max_consensus_facts, settings.max_unique_facts
    )
    key = list(consensus) if consensus else list(unique)
    key = key[: settings.max_key_facts]
    details = [f for f in unique if f not in key]

    lines = [f"Prompt: {prompt.strip()}", ""]
    if key:
        lines.append("Key facts:")
        lines += [f"- {f.text} ({', '.join(f.providers)})" for f in key]
    else:
        lines.append("The providers answered, but no factual statements could be extracted.")
    if details:
        lines += ["", "Unique details:"]
        lines += [f"- {f.text} ({f.providers[0]})" for f in details]
    if errors:
        lines += ["", "Provider errors:", *errors]

    sentences = [
        SummarySentence(text=f.text, citations=(), confidence=_confidence(f, usable_count))
        for f in [*key, *details][: settings.max_sentences]
    ]

    return Summary(
        final_answer="\n".join(lines),
        key_facts=tuple(f.text for f in key),
        sentences=tuple(sentences),
        disagreements=tuple(
            find_numeric_conflicts(facts, settings.merge_threshold, settings.max_disagreements)
        ),
        sources=tuple(sources),
        strategy="deterministic",
    )
