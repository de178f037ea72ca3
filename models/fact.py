"""Claim and Fact: the working data of fact aggregation."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Claim:
    """An atomic, sentence-sized assertion from one provider's answer."""

    text: str
    provider: str


@dataclass
class Fact:
    """
    A cluster of claims judged to express the same assertion.

    ``text`` is the representative text: the claim that created the cluster.
    ``providers`` keeps first-seen order and never holds duplicates.
    """

    id: int
    text: str
    providers: list[str] = field(default_factory=list)

    @classmethod
    def from_claim(cls, fact_id: int, claim: Claim) -> "Fact":
        return cls(id=fact_id, text=claim.text, providers=[claim.provider])

    def add_provider(self, provider: str) -> bool:
        """Record corroboration from ``provider``. Returns False if already present."""
        if provider in self.providers:
            return False
        self.providers.append(provider)
        return True

    @property
    def corroboration(self) -> int:
        return len(self.providers)

    @property
    def is_consensus(self) -> bool:
        return len(self.providers) >= 2

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "providers": list(self.providers)}
