import time

import httpx

from models.provider_answer import ProviderAnswer, ProviderRequest
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
MAX_ERROR_BODY_CHARS = 300


class AnthropicClient(BaseAIClient):
    """
    Anthropic Messages API adapter over httpx.

    The system prompt travels separately from the user message; the answer
    is the concatenation of all text blocks.
    """

    provider_name = "anthropic"
    label = "Claude"
    default_model = "claude-sonnet-4-5"

    def __init__(
        self,
        api_key: str,
        model_name: str | None = None,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(api_key, model_name=model_name, timeout_s=timeout_s)
        self._transport = transport

    def _build_payload(self, request: ProviderRequest, model: str) -> dict:
        payload = {
            "model": model,
            "max_tokens": self.resolve_max_tokens(request),
            "temperature": self.resolve_temperature(request),
            "messages": [{"role": "user", "content": request.prompt.strip()}],
        }
        system = (request.system_prompt or "").strip()
        if system:
            payload["system"] = system
        return payload

    async def get_completion(self, request: ProviderRequest) -> ProviderAnswer:
        start_time = time.time()
        model = self.resolve_model(request)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(
                    ANTHROPIC_API_URL,
                    headers={
                        "x-api-key": self.api_key,
                        "anthropic-version": ANTHROPIC_VERSION,
                        "content-type": "application/json",
                    },
                    json=self._build_payload(request, model),
                )

            if response.status_code >= 400:
                body = response.text[:MAX_ERROR_BODY_CHARS]
                logger.warning(
                    f"Anthropic returned HTTP {response.status_code}",
                    extra={"extra_fields": {"provider": self.provider_name, "model": model}},
                )
                return self._error_answer(
                    model, f"Anthropic {response.status_code}: {body}", start_time
                )

            data = response.json()
            blocks = data.get("content") if isinstance(data, dict) else None
            text = "\n".join(
                b["text"]
                for b in (blocks or [])
                if isinstance(b, dict) and b.get("type") == "text" and isinstance(b.get("text"), str)
            )
            answer = self._answer(model, text, start_time)

            logger.info(
                "Claude completion finished",
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
                f"Anthropic completion failed: {e!s}",
                extra={
                    "extra_fields": {
                        "provider": self.provider_name,
                        "model": model,
                        "error_type": type(e).__name__,
                    }
                },
            )
            return self._error_answer(model, f"Anthropic call failed: {e!s}", start_time)
