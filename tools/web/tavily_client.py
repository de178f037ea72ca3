"""Tavily search client used as the retrieval collector.

Returns an ordered list of RetrievalSource with 1-based ids. Never raises:
a missing key, an HTTP error or a transport failure all degrade to [].
"""

from typing import Any

import httpx

from utils.logger import get_logger

from .contracts import RetrievalSource

logger = get_logger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
DEFAULT_MAX_RESULTS = 6
DEFAULT_TIMEOUT_S = 8.0
MAX_RESULTS_CAP = 10


def normalize_results(payload: dict[str, Any], max_results: int) -> list[RetrievalSource]:
    """
    Map Tavily results to sources in result order.

    Results without content are skipped; ids stay sequential over the kept
    results so they can be used directly as citation keys.
    """
    sources: list[RetrievalSource] = []
    for item in payload.get("results") or []:
        if len(sources) >= max_results:
            break
        if not isinstance(item, dict):
            continue
        content = str(item.get("content") or "").strip()
        if not content:
            continue
        source_id = len(sources) + 1
        sources.append(
            RetrievalSource(
                id=source_id,
                title=str(item.get("title") or "").strip() or f"Source {source_id}",
                url=str(item.get("url") or "").strip(),
                snippet=content,
            )
        )
    return sources


class TavilyRetriever:
    """
    Tavily-powered web retrieval.

    Args:
        api_key: Tavily API key; empty disables retrieval
        timeout_s: Per-request timeout
        search_depth: "basic" (faster) or "advanced"
    """

    def __init__(
        self,
        api_key: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        search_depth: str = "basic",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = (api_key or "").strip()
        self.timeout_s = timeout_s
        self.search_depth = search_depth
        self._transport = transport

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[RetrievalSource]:
        if not self.api_key:
            logger.warning("TAVILY_API_KEY is not set; skipping web retrieval")
            return []

        max_results = max(1, min(int(max_results), MAX_RESULTS_CAP))
        request_payload = {
            "query": query,
            "max_results": max_results,
            "search_depth": self.search_depth,
            "include_answer": False,
            "include_raw_content": False,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(
                    TAVILY_SEARCH_URL,
                    json=request_payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
                payload = response.json() if response.content else {}
        except Exception as exc:
            logger.warning(
                "Tavily lookup failed",
                extra={"extra_fields": {"error": str(exc), "error_type": type(exc).__name__}},
            )
            return []

        sources = normalize_results(payload if isinstance(payload, dict) else {}, max_results)
        logger.info(
            f"Tavily returned {len(sources)} sources",
            extra={"extra_fields": {"max_results": max_results, "source_count": len(sources)}},
        )
        return sources
