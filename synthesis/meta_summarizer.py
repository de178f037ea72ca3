"""
MetaSummarizer - the synthesis engine.

Turns provider answers (and their ranked facts) into one Summary, either by
delegating to a synthesis backend under a strict JSON contract or, when no
backend is configured or it fails, by deterministic template assembly. A
Summary is always returned.
"""

import time
from collections.abc import Sequence

from aggregation.fact_aggregator import FactAggregator, split_consensus
from config.config import AggregationSettings, Config
from models.fact import Fact
from models.provider_answer import ProviderAnswer
from models.summary import Summary
from synthesis.backend import OpenAISynthesisBackend, SynthesisBackend
from synthesis.fallback import build_fallback_summary
from synthesis.json_extraction import parse_json_object
from synthesis.normalizer import normalize_summary
from synthesis.prompt_builder import build_system_instruction, build_user_message
from tools.web.contracts import RetrievalSource
from utils.logger import get_logger

logger = get_logger(__name__)


class MetaSummarizer:
    """
    Example usage:
        summarizer = MetaSummarizer(backend=OpenAISynthesisBackend(api_key=key))
        summary = await summarizer.summarize(prompt, answers, sources=sources)
        print(summary.to_dict()["finalAnswer"])
    """

    def __init__(
        self,
        backend: SynthesisBackend | None = None,
        settings: AggregationSettings | None = None,
        aggregator: FactAggregator | None = None,
    ):
        self.backend = backend
        self.settings = settings or AggregationSettings()
        self.aggregator = aggregator or FactAggregator(self.settings)

    @classmethod
    def from_config(
        cls, config: Config, settings: AggregationSettings | None = None
    ) -> "MetaSummarizer":
        """Delegated synthesis when a synthesis key is configured, else fallback only."""
        backend = None
        if config.META_SUMMARY_API_KEY:
            backend = OpenAISynthesisBackend(
                api_key=config.META_SUMMARY_API_KEY,
                model=config.META_SUMMARY_MODEL,
                max_tokens=config.META_SUMMARY_MAX_TOKENS,
            )
        else:
            logger.warning("No synthesis credential configured; using deterministic synthesis")
        return cls(backend=backend, settings=settings)

    async def summarize(
        self,
        prompt: str,
        answers: Sequence[ProviderAnswer],
        facts: Sequence[Fact] | None = None,
        sources: Sequence[RetrievalSource] = (),
    ) -> Summary:
        """
        Produce the Summary for one run.

        Args:
            prompt: The user's original prompt (without the evidence block)
            answers: ProviderAnswers in request order
            facts: Pre-computed ranked facts; aggregated here when omitted
            sources: Retrieval sources of the run, echoed unchanged
        """
        if facts is None:
            facts = self.aggregator.aggregate(answers)
        sources = tuple(sources)

        if not any(a.has_usable_text for a in answers):
            logger.warning(
                "No usable provider text; returning empty summary",
                extra={"extra_fields": {"answers": len(answers)}},
            )
            return build_fallback_summary(prompt, answers, facts, sources, self.settings)

        if self.backend is None:
            return build_fallback_summary(prompt, answers, facts, sources, self.settings)

        start_time = time.time()
        try:
            summary = await self._delegate(prompt, answers, facts, sources)
        except Exception as e:
            logger.warning(
                f"Delegated synthesis failed, falling back to deterministic synthesis: {e}",
                extra={
                    "extra_fields": {
                        "backend": getattr(self.backend, "name", "unknown"),
                        "error_type": type(e).__name__,
                        "latency_ms": int((time.time() - start_time) * 1000),
                    }
                },
            )
            return build_fallback_summary(prompt, answers, facts, sources, self.settings)

        logger.info(
            "Delegated synthesis complete",
            extra={
                "extra_fields": {
                    "sentences": len(summary.sentences),
                    "key_facts": len(summary.key_facts),
                    "disagreements": len(summary.disagreements),
                    "latency_ms": int((time.time() - start_time) * 1000),
                }
            },
        )
        return summary

    async def _delegate(
        self,
        prompt: str,
        answers: Sequence[ProviderAnswer],
        facts: Sequence[Fact],
        sources: tuple[RetrievalSource, ...],
    ) -> Summary:
        consensus, unique = split_consensus(
            facts, self.settings.max_consensus_facts, self.settings.max_unique_facts
        )
        system = build_system_instruction(self.settings, has_sources=bool(sources))
        user = build_user_message(prompt, answers, consensus, unique, sources, self.settings)

        raw = await self.backend.complete(system, user)
        parsed = parse_json_object(raw)
        return normalize_summary(parsed, sources, self.settings)
