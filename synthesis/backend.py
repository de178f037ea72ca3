"""Delegated synthesis backends."""

from typing import Protocol, runtime_checkable

import openai

from api.openai_client import token_limit_param
from models.errors import SynthesisError
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SYNTHESIS_MODEL = "gpt-4.1"


@runtime_checkable
class SynthesisBackend(Protocol):
    """Turns a system instruction and a user message into raw model text."""

    name: str

    async def complete(self, system: str, user: str) -> str:
        """Return the raw output text; may raise on transport errors."""
        ...


class OpenAISynthesisBackend:
    """
    Synthesis through the OpenAI chat completions API in JSON mode.
    """

    name: str = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_SYNTHESIS_MODEL,
        max_tokens: int = 1800,
        temperature: float = 0.2,
        timeout_s: float = 90.0,
    ):
        if not api_key:
            raise ValueError("API key is required for delegated synthesis")
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, system: str, user: str) -> str:
        params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "response_format": {"type": "json_object"},
            token_limit_param(self.model): self.max_tokens,
        }
        # gpt-5 family only accepts the default temperature
        if not self.model.startswith("gpt-5"):
            params["temperature"] = self.temperature

        # one client per call, closed with its connection pool
        async with openai.AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_s) as client:
            response = await client.chat.completions.create(**params)
        text = (response.choices[0].message.content or "") if response.choices else ""
        if not text.strip():
            raise SynthesisError("Meta-summary returned empty output.")

        logger.info(
            "Synthesis backend returned output",
            extra={
                "extra_fields": {
                    "model": self.model,
                    "chars": len(text),
                    "finish_reason": response.choices[0].finish_reason,
                }
            },
        )
        return text
