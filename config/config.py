import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Environment variable names per provider; the first one set wins.
PROVIDER_ENV_VARS: dict[str, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_GEMINI_API_KEY"),
    "xai": ("XAI_API_KEY",),
}


@dataclass(frozen=True)
class AggregationSettings:
    """
    Tunable limits for fact aggregation and synthesis.

    The defaults are empirical; callers may override any of them per run.
    """

    min_claim_chars: int = 20
    merge_threshold: float = 0.72
    max_facts: int = 40
    max_consensus_facts: int = 14
    max_unique_facts: int = 14
    max_sentences: int = 40
    max_key_facts: int = 20
    max_disagreements: int = 20
    max_prompt_sources: int = 10

    def __post_init__(self):
        if not 0.0 < self.merge_threshold <= 1.0:
            raise ValueError("merge_threshold must be in (0, 1]")
        if self.min_claim_chars < 1:
            raise ValueError("min_claim_chars must be positive")


class Config:
    """Configuration management for the application."""

    def __init__(self, env_file: str | Path | None = None):
        """
        Read configuration from the process environment.

        Args:
            env_file: Optional .env path; defaults to the project root .env
        """
        env_path = Path(env_file) if env_file else Path(__file__).parent.parent / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Provider credentials (fallback when the caller supplies none)
        self.PROVIDER_API_KEYS: dict[str, str] = {
            provider: self._first_env(names) for provider, names in PROVIDER_ENV_VARS.items()
        }

        # Retrieval
        self.TAVILY_API_KEY = (os.getenv("TAVILY_API_KEY") or "").strip()
        self.RETRIEVAL_MAX_RESULTS = int(os.getenv("RETRIEVAL_MAX_RESULTS", "6"))
        self.RETRIEVAL_TIMEOUT_S = float(os.getenv("RETRIEVAL_TIMEOUT_S", "8"))

        # Delegated synthesis (OpenAI-backed)
        self.META_SUMMARY_MODEL = os.getenv("META_SUMMARY_MODEL", "gpt-4.1")
        self.META_SUMMARY_API_KEY = (
            os.getenv("META_SUMMARY_API_KEY") or self.PROVIDER_API_KEYS.get("openai", "")
        ).strip()
        self.META_SUMMARY_MAX_TOKENS = int(os.getenv("META_SUMMARY_MAX_TOKENS", "1800"))

        # Fan-out
        self.PROVIDER_TIMEOUT_S = float(os.getenv("PROVIDER_TIMEOUT_S", "60"))

    @staticmethod
    def _first_env(names: tuple[str, ...]) -> str:
        for name in names:
            value = (os.getenv(name) or "").strip()
            if value:
                return value
        return ""

    def is_configured(self, provider: str) -> bool:
        return bool(self.PROVIDER_API_KEYS.get(provider))

    def provider_status(self) -> dict[str, bool]:
        """
        Report which providers have a server-side credential.

        Returns:
            Mapping of provider id to configured flag
        """
        return {provider: self.is_configured(provider) for provider in PROVIDER_ENV_VARS}
