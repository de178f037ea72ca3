import time

from google import genai
from google.genai import types

from models.provider_answer import ProviderAnswer, ProviderRequest
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)


class GeminiClient(BaseAIClient):
    """
    Google Gemini adapter using the google.genai package (async surface).
    """

    provider_name = "gemini"
    label = "Gemini"
    default_model = "gemini-2.5-flash"

    def __init__(self, api_key: str, model_name: str | None = None, timeout_s: float = 60.0):
        super().__init__(api_key, model_name=model_name, timeout_s=timeout_s)
        if not self.api_key:
            raise ValueError("API key is required for Gemini")
        self.client = genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(timeout_s * 1000)),
        )

    async def aclose(self) -> None:
        # genai.Client holds a sync and an async transport
        await self.client.aio.aclose()
        self.client.close()

    def _build_config(self, request: ProviderRequest) -> types.GenerateContentConfig:
        system = (request.system_prompt or "").strip()
        return types.GenerateContentConfig(
            system_instruction=system or None,
            temperature=self.resolve_temperature(request),
            max_output_tokens=self.resolve_max_tokens(request),
        )

    @staticmethod
    def _extract_text(response) -> str:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return ""
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        return "".join(getattr(p, "text", None) or "" for p in parts)

    async def get_completion(self, request: ProviderRequest) -> ProviderAnswer:
        start_time = time.time()
        model = self.resolve_model(request)

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=request.prompt.strip(),
                config=self._build_config(request),
            )
            answer = self._answer(model, self._extract_text(response), start_time)

            logger.info(
                "Gemini completion finished",
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
                f"Gemini completion failed: {e!s}",
                extra={
                    "extra_fields": {
                        "provider": self.provider_name,
                        "model": model,
                        "error_type": type(e).__name__,
                    }
                },
            )
            return self._error_answer(model, f"Gemini call failed: {e!s}", start_time)
