"""
Summary - the structured meta-summary produced once per run.

``to_dict`` emits the wire contract: every key is always present and the
arrays may be empty.
"""

from dataclasses import dataclass, field
from typing import Any

from tools.web.contracts import RetrievalSource


@dataclass(frozen=True)
class SummarySentence:
    text: str
    citations: tuple[int, ...] = ()
    confidence: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "citations": list(self.citations),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Summary:
    """
    Attributes:
        final_answer: Readable answer text (or the fallback report)
        key_facts: Deduplicated key facts, bounded
        sentences: Sentence objects with citation ids and 0-100 confidence
        disagreements: Conflicts or uncertainties between providers
        sources: Retrieval sources echoed from the run input
        strategy: "delegated" or "deterministic"
    """

    final_answer: str
    key_facts: tuple[str, ...] = ()
    sentences: tuple[SummarySentence, ...] = ()
    disagreements: tuple[str, ...] = ()
    sources: tuple[RetrievalSource, ...] = ()
    strategy: str = field(default="deterministic", compare=False)

    @property
    def source_ids(self) -> set[int]:
        return {s.id for s in self.sources}

    def to_dict(self) -> dict[str, Any]:
        return {
            "finalAnswer": self.final_answer,
            "keyFacts": list(self.key_facts),
            "sentences": [s.to_dict() for s in self.sentences],
            "disagreements": list(self.disagreements),
            "sources": [s.to_dict() for s in self.sources],
        }
