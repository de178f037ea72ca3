"""
Run containers - results of a fan-out and of a full pipeline run.

Immutable; answers are kept in caller-supplied provider order.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from models.fact import Fact
from models.provider_answer import ProviderAnswer
from models.summary import Summary
from tools.web.contracts import RetrievalSource


@dataclass(frozen=True)
class FanOutResult:
    """
    Attributes:
        answers: One ProviderAnswer per requested provider, in request order
        sources: Retrieval sources appended to the prompt (empty when unused)
        used_retrieval: True when at least one source augmented the prompt
        request_group_id: Correlation id for logs
        created_at: UTC timestamp when the fan-out started
    """

    answers: tuple[ProviderAnswer, ...] = field(default_factory=tuple)
    sources: tuple[RetrievalSource, ...] = field(default_factory=tuple)
    used_retrieval: bool = False
    request_group_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success_count(self) -> int:
        return sum(1 for a in self.answers if a.is_success)

    @property
    def error_count(self) -> int:
        return sum(1 for a in self.answers if a.is_error)

    @property
    def usable_answers(self) -> tuple[ProviderAnswer, ...]:
        return tuple(a for a in self.answers if a.has_usable_text)

    def __len__(self) -> int:
        return len(self.answers)


@dataclass(frozen=True)
class RunResult:
    fan_out: FanOutResult
    facts: tuple[Fact, ...]
    summary: Summary

    @property
    def answers(self) -> tuple[ProviderAnswer, ...]:
        return self.fan_out.answers

    @property
    def sources(self) -> tuple[RetrievalSource, ...]:
        return self.fan_out.sources

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestGroupId": self.fan_out.request_group_id,
            "results": [a.to_dict() for a in self.answers],
            "sources": [s.to_dict() for s in self.sources],
            "usedRetrieval": self.fan_out.used_retrieval,
            "facts": [f.to_dict() for f in self.facts],
            "summary": self.summary.to_dict(),
        }
