from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from api.anthropic_client import AnthropicClient
from api.base_client import BaseAIClient
from api.google_gemini_client import GeminiClient
from api.grok_client import GrokClient
from api.openai_client import OpenAIClient
from models.provider_answer import ProviderName

ClientFactory = Callable[[str, str | None, float], BaseAIClient]


@dataclass(frozen=True)
class ProviderSpec:
    name: ProviderName
    label: str
    default_model: str
    client_cls: type[BaseAIClient]


PROVIDER_REGISTRY: dict[ProviderName, ProviderSpec] = {
    ProviderName.OPENAI: ProviderSpec(
        ProviderName.OPENAI, OpenAIClient.label, OpenAIClient.default_model, OpenAIClient
    ),
    ProviderName.ANTHROPIC: ProviderSpec(
        ProviderName.ANTHROPIC, AnthropicClient.label, AnthropicClient.default_model, AnthropicClient
    ),
    ProviderName.GEMINI: ProviderSpec(
        ProviderName.GEMINI, GeminiClient.label, GeminiClient.default_model, GeminiClient
    ),
    ProviderName.XAI: ProviderSpec(
        ProviderName.XAI, GrokClient.label, GrokClient.default_model, GrokClient
    ),
}


class ProviderRegistry:
    """
    Maps provider ids to client constructors.

    Tests (and callers with custom adapters) pass ``factories`` to replace
    the real SDK-backed clients.
    """

    def __init__(self, factories: dict[ProviderName, ClientFactory] | None = None):
        self._factories: dict[ProviderName, ClientFactory] = {
            name: spec.client_cls for name, spec in PROVIDER_REGISTRY.items()
        }
        if factories:
            self._factories.update(factories)

    def supported(self) -> list[ProviderName]:
        return list(self._factories)

    def default_model(self, provider: ProviderName) -> str:
        spec = PROVIDER_REGISTRY.get(provider)
        return spec.default_model if spec else ""

    def create_client(
        self, provider: ProviderName, api_key: str, model: str | None, timeout_s: float
    ) -> BaseAIClient:
        factory = self._factories.get(provider)
        if factory is None:
            raise ValueError(f"Unknown provider: {provider}")
        return factory(api_key, model, timeout_s)
