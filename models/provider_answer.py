"""
ProviderAnswer - one provider's normalized response to a prompt.

Adapters, the fan-out orchestrator and the expander all produce this shape;
the fact aggregator and the synthesis engine consume it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ProviderName(str, Enum):
    """Supported provider identifiers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    XAI = "xai"

    @classmethod
    def parse(cls, value: str) -> "ProviderName | None":
        """Return the enum member for ``value`` or None when unsupported."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


# Error codes carried on ProviderAnswer.error_code
UNKNOWN_PROVIDER = "unknown_provider"
MISSING_CREDENTIAL = "missing_credential"
CALL_FAILED = "call_failed"

ERROR_CODES = {UNKNOWN_PROVIDER, MISSING_CREDENTIAL, CALL_FAILED}


@dataclass(frozen=True)
class ProviderRequest:
    prompt: str
    system_prompt: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class ProviderAnswer:
    provider: str
    model: str
    text: str
    latency_ms: int
    error: str | None = None
    error_code: str | None = None

    def __post_init__(self):
        if self.error is not None and self.error_code not in ERROR_CODES:
            object.__setattr__(self, "error_code", CALL_FAILED)
        if self.error is None and self.error_code is not None:
            object.__setattr__(self, "error_code", None)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def has_usable_text(self) -> bool:
        """True when the answer can contribute claims."""
        return self.error is None and bool((self.text or "").strip())

    @classmethod
    def failure(
        cls, provider: str, message: str, code: str = CALL_FAILED, model: str = "", latency_ms: int = 0
    ) -> "ProviderAnswer":
        return cls(
            provider=provider,
            model=model,
            text="",
            latency_ms=latency_ms,
            error=message,
            error_code=code,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "model": self.model,
            "text": self.text,
            "latencyMs": self.latency_ms,
            "error": self.error,
            "errorCode": self.error_code,
        }
