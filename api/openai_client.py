import time

import openai

from models.provider_answer import ProviderAnswer, ProviderRequest
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)

PREFERRED_MODEL_PREFIXES = ("gpt-5",)
FALLBACK_MODEL_PREFIXES = ("gpt-4.1", "gpt-4.1-mini", "gpt-4o", "gpt-4o-mini", "gpt-4")


def token_limit_param(model: str) -> str:
    """gpt-5 models take ``max_completion_tokens``; older chat models take ``max_tokens``."""
    return "max_completion_tokens" if model.startswith("gpt-5") else "max_tokens"


class OpenAIClient(BaseAIClient):
    """
    OpenAI chat completions adapter.
    """

    provider_name = "openai"
    label = "ChatGPT"
    default_model = "gpt-4.1"

    def __init__(self, api_key: str, model_name: str | None = None, timeout_s: float = 60.0):
        super().__init__(api_key, model_name=model_name, timeout_s=timeout_s)
        self.client = self._create_client()

    def _create_client(self) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_s)

    async def aclose(self) -> None:
        await self.client.close()

    def _build_messages(self, request: ProviderRequest) -> list[dict[str, str]]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})
        return messages

    async def get_completion(self, request: ProviderRequest) -> ProviderAnswer:
        """
        Args:
            request: Normalized request; model/temperature/max_tokens override defaults

        Returns:
            ProviderAnswer (error set on failure, never raises)
        """
        start_time = time.time()
        model = self.resolve_model(request)

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=self._build_messages(request),
                temperature=self.resolve_temperature(request),
                **{token_limit_param(model): self.resolve_max_tokens(request)},
            )
            text = response.choices[0].message.content if response.choices else ""
            answer = self._answer(model, text or "", start_time)

            logger.info(
                f"{self.label} completion finished",
                extra={
                    "extra_fields": {
                        "provider": self.provider_name,
                        "model": model,
                        "latency_ms": answer.latency_ms,
                        "chars": len(answer.text),
                    }
                },
            )
            return answer

        except Exception as e:
            logger.error(
                f"{self.label} completion failed: {e!s}",
                extra={
                    "extra_fields": {
                        "provider": self.provider_name,
                        "model": model,
                        "error_type": type(e).__name__,
                    }
                },
            )
            return self._error_answer(model, f"{self.label} call failed: {e!s}", start_time)

    async def list_models(self) -> list[str]:
        """
        Usable chat model ids: gpt-5 family first, then common fallbacks.

        Raises on API failure; callers decide how to degrade.
        """
        page = await self.client.models.list()
        ids = [m.id for m in page.data if m.id]
        preferred = [i for i in ids if i.lower().startswith(PREFERRED_MODEL_PREFIXES)]
        fallbacks = [i for i in ids if i.lower().startswith(FALLBACK_MODEL_PREFIXES)]
        return list(dict.fromkeys(sorted(preferred) + sorted(fallbacks)))
