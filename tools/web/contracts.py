"""Data contracts for web retrieval."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RetrievalSource:
    """
    One web search result used as citable evidence.

    ``id`` is 1-based, assigned in result order, and is the citation key.
    """

    id: int
    title: str
    url: str
    snippet: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "url": self.url, "snippet": self.snippet}
