import time
from abc import ABC, abstractmethod

from models.provider_answer import CALL_FAILED, ProviderAnswer, ProviderRequest

DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 1400
NO_TEXT_ERROR = "No text returned from provider."


class BaseAIClient(ABC):
    """
    Abstract base class for provider adapters.

    Subclasses turn a ProviderRequest into a ProviderAnswer. They must not
    raise for ordinary failures (HTTP errors, bad payloads, timeouts inside
    the SDK); those come back as an answer with ``error`` set.
    """

    provider_name: str = ""
    label: str = ""
    default_model: str = ""

    def __init__(self, api_key: str, model_name: str | None = None, timeout_s: float = 60.0):
        """
        Args:
            api_key: Credential for the provider API
            model_name: Default model; falls back to the class default
            timeout_s: Network timeout for one call
        """
        self.api_key = (api_key or "").strip()
        self.model_name = (model_name or "").strip() or self.default_model
        self.timeout_s = timeout_s

    @abstractmethod
    async def get_completion(self, request: ProviderRequest) -> ProviderAnswer:
        """Send one request; never raises for provider-side failures."""

    async def aclose(self) -> None:
        """Release pooled connections. Adapters that open a client per call have nothing to do."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def resolve_model(self, request: ProviderRequest) -> str:
        return (request.model or "").strip() or self.model_name

    @staticmethod
    def resolve_temperature(request: ProviderRequest) -> float:
        return request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE

    @staticmethod
    def resolve_max_tokens(request: ProviderRequest) -> int:
        return request.max_tokens if request.max_tokens is not None else DEFAULT_MAX_TOKENS

    @staticmethod
    def _measure_latency(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def _answer(self, model: str, text: str, start_time: float) -> ProviderAnswer:
        """Success answer; empty text is reported as an error."""
        text = (text or "").strip()
        return ProviderAnswer(
            provider=self.provider_name,
            model=model,
            text=text,
            latency_ms=self._measure_latency(start_time),
            error=None if text else NO_TEXT_ERROR,
            error_code=None if text else CALL_FAILED,
        )

    def _error_answer(self, model: str, message: str, start_time: float) -> ProviderAnswer:
        return ProviderAnswer.failure(
            provider=self.provider_name,
            message=message,
            code=CALL_FAILED,
            model=model,
            latency_ms=self._measure_latency(start_time),
        )
