"""
MultiModelOrchestrator - concurrent fan-out of one prompt to several providers.

Every requested provider yields exactly one ProviderAnswer, in the order the
caller listed them, regardless of completion order. Unknown providers,
missing credentials and failed calls become error answers; they never raise
and never cancel the other calls.
"""

import asyncio
import concurrent.futures
import time
import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from api.base_client import BaseAIClient
from config.config import Config
from config.provider_config import ProviderConfig, parse_provider_configs
from models.errors import InputValidationError
from models.provider_answer import (
    MISSING_CREDENTIAL,
    UNKNOWN_PROVIDER,
    ProviderAnswer,
    ProviderName,
    ProviderRequest,
)
from models.run_result import FanOutResult
from orchestrator.credentials import CredentialResolver
from orchestrator.provider_registry import ProviderRegistry
from tools.web.contracts import RetrievalSource
from tools.web.research_pack import augment_prompt
from tools.web.tavily_client import TavilyRetriever
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = """
You are a helpful assistant.

Rules:
- Do not invent facts. If unsure, say so.
- If web sources are provided, cite them using [1], [2], etc.
- Do not output personal contact details (home address, phone number, personal email).
- Do not claim two handles/accounts are the same person unless a source explicitly states it.
""".strip()

MISSING_KEY_MESSAGE = "API key not set (client or server)."


def validate_run_input(prompt: str | None, providers: Sequence[str] | None) -> tuple[str, list[str]]:
    """
    Reject unusable input before any network activity.

    Returns:
        (stripped prompt, provider ids as given)
    """
    prompt = (prompt or "").strip()
    if not prompt:
        raise InputValidationError("Missing prompt.")
    if not providers:
        raise InputValidationError("Missing provider list.")
    return prompt, [str(p) for p in providers]


class MultiModelOrchestrator:
    """
    Orchestrates parallel calls to multiple providers.

    Example usage:
        orchestrator = MultiModelOrchestrator.from_config(Config())
        result = orchestrator.fan_out_sync("What is Python?", ["openai", "gemini"])
        for answer in result.answers:
            print(f"{answer.provider}/{answer.model}: {answer.text[:100]}")
    """

    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        credentials: CredentialResolver | None = None,
        retriever: TavilyRetriever | None = None,
        default_timeout_s: float = 60.0,
        retrieval_max_results: int = 6,
    ):
        """
        Args:
            registry: Provider id -> client constructor
            credentials: Key resolver (caller keys first, then its fallback)
            retriever: Optional web retrieval collector
            default_timeout_s: Timeout applied to each provider call
            retrieval_max_results: Source count requested when retrieval is on
        """
        self.registry = registry or ProviderRegistry()
        self.credentials = credentials or CredentialResolver()
        self.retriever = retriever
        self.default_timeout_s = default_timeout_s
        self.retrieval_max_results = retrieval_max_results

    @classmethod
    def from_config(
        cls,
        config: Config,
        registry: ProviderRegistry | None = None,
        retriever: TavilyRetriever | None = None,
    ) -> "MultiModelOrchestrator":
        from tools.web.factory import create_retriever

        return cls(
            registry=registry,
            credentials=CredentialResolver.from_config(config),
            retriever=retriever or create_retriever(config),
            default_timeout_s=config.PROVIDER_TIMEOUT_S,
            retrieval_max_results=config.RETRIEVAL_MAX_RESULTS,
        )

    async def retrieve(self, prompt: str, enabled: bool) -> list[RetrievalSource]:
        """
        Run the single web search for a run. Failures degrade to [].
        """
        if not enabled:
            return []
        if self.retriever is None:
            logger.warning("Retrieval requested but no retriever is configured")
            return []
        try:
            return list(await self.retriever.search(prompt, self.retrieval_max_results))
        except Exception as e:
            logger.warning(
                f"Retrieval failed; continuing without sources: {e}",
                extra={"extra_fields": {"error_type": type(e).__name__}},
            )
            return []

    def build_request(
        self,
        prompt: str,
        system_prompt: str | None,
        config: ProviderConfig,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ProviderRequest:
        """Per-provider config wins over the given call defaults."""
        return ProviderRequest(
            prompt=prompt,
            system_prompt=system_prompt,
            model=config.model,
            temperature=config.temperature if config.temperature is not None else temperature,
            max_tokens=config.max_tokens if config.max_tokens is not None else max_tokens,
        )

    async def call_provider(
        self,
        provider_id: str,
        request: ProviderRequest,
        api_keys: Mapping[str, str] | None,
        timeout_s: float,
    ) -> ProviderAnswer:
        """
        Resolve, construct and call one provider. Always returns an answer.
        """
        provider = ProviderName.parse(provider_id)
        if provider is None or provider not in self.registry.supported():
            logger.warning(
                f"Unknown provider requested: {provider_id}",
                extra={"extra_fields": {"provider": provider_id}},
            )
            return ProviderAnswer.failure(
                provider_id, f"Unknown provider: {provider_id}", code=UNKNOWN_PROVIDER
            )

        model = request.model or self.registry.default_model(provider)
        api_key = self.credentials.resolve(provider.value, api_keys)
        if not api_key:
            return ProviderAnswer.failure(
                provider.value, MISSING_KEY_MESSAGE, code=MISSING_CREDENTIAL, model=model
            )

        start_time = time.time()
        client = None
        try:
            client = self.registry.create_client(provider, api_key, request.model, timeout_s)
            return await asyncio.wait_for(client.get_completion(request), timeout=timeout_s)

        except asyncio.TimeoutError:
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.warning(
                f"Timeout for {provider.value}/{model}",
                extra={
                    "extra_fields": {
                        "provider": provider.value,
                        "model": model,
                        "timeout_s": timeout_s,
                    }
                },
            )
            return ProviderAnswer.failure(
                provider.value,
                f"Provider call failed: timed out after {timeout_s:g}s",
                model=model,
                latency_ms=elapsed_ms,
            )

        except Exception as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.error(
                f"Unexpected error for {provider.value}/{model}: {e}",
                extra={
                    "extra_fields": {
                        "provider": provider.value,
                        "model": model,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    }
                },
            )
            return ProviderAnswer.failure(
                provider.value, f"Provider call failed: {e!s}", model=model, latency_ms=elapsed_ms
            )

        finally:
            if client is not None:
                await self._close_client(provider, client)

    @staticmethod
    async def _close_client(provider: ProviderName, client: BaseAIClient) -> None:
        try:
            await client.aclose()
        except Exception as e:
            logger.warning(
                f"Closing {provider.value} client failed: {e}",
                extra={"extra_fields": {"provider": provider.value, "error_type": type(e).__name__}},
            )

    async def fan_out(
        self,
        prompt: str,
        providers: Sequence[str],
        api_keys: Mapping[str, str] | None = None,
        provider_configs: Mapping[str, Any] | None = None,
        use_retrieval: bool = False,
        system_prompt: str | None = None,
        timeout_s: float | None = None,
        request_group_id: str | None = None,
    ) -> FanOutResult:
        """
        Send the (optionally retrieval-augmented) prompt to every provider.

        Args:
            prompt: User prompt
            providers: Provider ids in the order results should be returned
            api_keys: Caller-supplied keys by provider id
            provider_configs: ``{provider: {model, temperature, maxTokens}}``
            use_retrieval: Append web sources to the prompt first
            system_prompt: Override for DEFAULT_SYSTEM_PROMPT
            timeout_s: Per-call timeout (defaults to self.default_timeout_s)
            request_group_id: Optional caller correlation id

        Returns:
            FanOutResult with answers in request order

        Raises:
            InputValidationError: prompt or provider list missing
        """
        prompt, provider_ids = validate_run_input(prompt, providers)
        timeout = timeout_s or self.default_timeout_s
        request_group_id = request_group_id or str(uuid.uuid4())
        created_at = datetime.now(timezone.utc)
        configs = parse_provider_configs(dict(provider_configs or {}))
        system = (system_prompt or DEFAULT_SYSTEM_PROMPT).strip()

        logger.info(
            f"Starting fan-out to {len(provider_ids)} providers",
            extra={
                "extra_fields": {
                    "request_group_id": request_group_id,
                    "providers": provider_ids,
                    "use_retrieval": use_retrieval,
                    "timeout_s": timeout,
                }
            },
        )

        sources = await self.retrieve(prompt, use_retrieval)
        effective_prompt = augment_prompt(prompt, sources)

        tasks = [
            self.call_provider(
                provider_id,
                self.build_request(
                    effective_prompt,
                    system,
                    configs.get(provider_id.strip().lower(), ProviderConfig()),
                ),
                api_keys,
                timeout,
            )
            for provider_id in provider_ids
        ]
        # call_provider never raises, so gather keeps one slot per provider
        answers = await asyncio.gather(*tasks)

        result = FanOutResult(
            answers=tuple(answers),
            sources=tuple(sources),
            used_retrieval=bool(sources),
            request_group_id=request_group_id,
            created_at=created_at,
        )

        logger.info(
            f"Fan-out complete: {result.success_count} success, {result.error_count} errors",
            extra={
                "extra_fields": {
                    "request_group_id": request_group_id,
                    "success_count": result.success_count,
                    "error_count": result.error_count,
                    "source_count": len(sources),
                }
            },
        )
        return result

    def fan_out_sync(self, prompt: str, providers: Sequence[str], **kwargs) -> FanOutResult:
        """
        Synchronous wrapper for fan_out.

        When an event loop is already running, the coroutine runs in a
        separate thread with its own loop.
        """
        return run_coroutine_sync(lambda: self.fan_out(prompt, providers, **kwargs))


def run_coroutine_sync(make_coro):
    """
    Run the coroutine built by ``make_coro`` to completion from sync code.

    ``make_coro`` is a zero-argument callable so the coroutine is created
    inside whichever loop ends up running it.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(make_coro())

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(lambda: asyncio.run(make_coro())).result()
