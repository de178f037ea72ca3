"""
MetaClient - the end-to-end pipeline.

fan-out -> fact aggregation -> synthesis. Aggregation starts only after every
provider call has resolved, and a Summary is produced even when every
provider failed.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from aggregation.fact_aggregator import FactAggregator
from config.config import AggregationSettings, Config
from models.provider_answer import ProviderAnswer
from models.run_result import RunResult
from models.summary import Summary
from orchestrator.expander import AnswerExpander
from orchestrator.multi_orchestrator import (
    MultiModelOrchestrator,
    run_coroutine_sync,
    validate_run_input,
)
from orchestrator.provider_registry import ProviderRegistry
from synthesis.meta_summarizer import MetaSummarizer
from tools.web.contracts import RetrievalSource
from utils.logger import get_logger

logger = get_logger(__name__)


class MetaClient:
    """
    Example usage:
        client = MetaClient.from_config(Config())
        run = client.run_sync("How tall is the tower?", ["openai", "anthropic"])
        print(run.summary.final_answer)
    """

    def __init__(
        self,
        orchestrator: MultiModelOrchestrator | None = None,
        summarizer: MetaSummarizer | None = None,
        settings: AggregationSettings | None = None,
    ):
        self.settings = settings or AggregationSettings()
        self.orchestrator = orchestrator or MultiModelOrchestrator()
        self.aggregator = FactAggregator(self.settings)
        self.summarizer = summarizer or MetaSummarizer(
            settings=self.settings, aggregator=self.aggregator
        )
        self.expander = AnswerExpander(self.orchestrator)

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        settings: AggregationSettings | None = None,
        registry: ProviderRegistry | None = None,
    ) -> "MetaClient":
        config = config or Config()
        settings = settings or AggregationSettings()
        return cls(
            orchestrator=MultiModelOrchestrator.from_config(config, registry=registry),
            summarizer=MetaSummarizer.from_config(config, settings),
            settings=settings,
        )

    async def run(
        self,
        prompt: str,
        providers: Sequence[str],
        api_keys: Mapping[str, str] | None = None,
        provider_configs: Mapping[str, Any] | None = None,
        use_retrieval: bool = False,
        system_prompt: str | None = None,
    ) -> RunResult:
        """
        Run the full pipeline.

        Raises:
            InputValidationError: prompt or provider list missing
        """
        prompt, provider_ids = validate_run_input(prompt, providers)

        fan_out = await self.orchestrator.fan_out(
            prompt,
            provider_ids,
            api_keys=api_keys,
            provider_configs=provider_configs,
            use_retrieval=use_retrieval,
            system_prompt=system_prompt,
        )
        facts = self.aggregator.aggregate(fan_out.answers)
        summary = await self.summarizer.summarize(
            prompt, fan_out.answers, facts=facts, sources=fan_out.sources
        )

        logger.info(
            "Run complete",
            extra={
                "extra_fields": {
                    "request_group_id": fan_out.request_group_id,
                    "facts": len(facts),
                    "strategy": summary.strategy,
                }
            },
        )
        return RunResult(fan_out=fan_out, facts=tuple(facts), summary=summary)

    def run_sync(self, prompt: str, providers: Sequence[str], **kwargs) -> RunResult:
        return run_coroutine_sync(lambda: self.run(prompt, providers, **kwargs))

    async def summarize(
        self,
        prompt: str,
        answers: Sequence[ProviderAnswer],
        sources: Sequence[RetrievalSource] = (),
    ) -> Summary:
        """Aggregate and synthesize caller-supplied answers (no fan-out)."""
        return await self.summarizer.summarize(prompt, answers, sources=sources)

    async def expand(self, original_prompt: str, previous_answers, providers, **kwargs):
        return await self.expander.expand(original_prompt, previous_answers, providers, **kwargs)
