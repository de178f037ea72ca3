import openai

from .openai_client import OpenAIClient

XAI_BASE_URL = "https://api.x.ai/v1"


class GrokClient(OpenAIClient):
    """
    xAI Grok adapter.

    The xAI API is OpenAI-compatible, so this reuses the OpenAI SDK with a
    custom base URL. Grok always takes ``max_tokens``.
    """

    provider_name = "xai"
    label = "Grok"
    default_model = "grok-3"

    def _create_client(self) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(api_key=self.api_key, base_url=XAI_BASE_URL, timeout=self.timeout_s)
