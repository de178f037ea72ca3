"""Credential resolution for provider calls."""

from collections.abc import Mapping

from config.config import Config


class CredentialResolver:
    """
    Resolves one API key per provider.

    Caller-supplied keys win; the fallback mapping (normally the server
    environment, captured in Config) is consulted only when the caller gave
    nothing usable. Blank strings count as missing.
    """

    def __init__(self, fallback: Mapping[str, str] | None = None):
        self._fallback = {k: (v or "").strip() for k, v in (fallback or {}).items()}

    @classmethod
    def from_config(cls, config: Config) -> "CredentialResolver":
        return cls(fallback=config.PROVIDER_API_KEYS)

    def resolve(self, provider: str, supplied: Mapping[str, str] | None = None) -> str:
        value = (supplied or {}).get(provider)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return self._fallback.get(provider, "")

    def has_fallback(self, provider: str) -> bool:
        return bool(self._fallback.get(provider))
