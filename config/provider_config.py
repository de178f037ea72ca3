"""Closed per-provider generation settings."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from utils.logger import get_logger

logger = get_logger(__name__)


class ProviderConfig(BaseModel):
    """
    Generation overrides for one provider.

    Only ``model``, ``temperature`` and ``max_tokens`` are recognized; any
    other key is dropped. Unset fields fall back to the provider defaults.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    model: str | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, gt=0, alias="maxTokens")

    @field_validator("model")
    @classmethod
    def blank_model_means_default(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


def parse_provider_configs(raw: Any) -> dict[str, ProviderConfig]:
    """
    Validate a caller-supplied ``{provider: {...}}`` mapping.

    Entries that fail validation are logged and replaced by an empty
    config so one bad entry never takes down the run.
    """
    if not isinstance(raw, dict):
        return {}

    configs: dict[str, ProviderConfig] = {}
    for provider, value in raw.items():
        key = str(provider).strip().lower()
        if isinstance(value, ProviderConfig):
            configs[key] = value
            continue
        if not isinstance(value, dict):
            configs[key] = ProviderConfig()
            continue
        try:
            configs[key] = ProviderConfig.model_validate(value)
        except ValidationError as e:
            logger.warning(
                f"Ignoring invalid provider config for {provider}",
                extra={"extra_fields": {"provider": provider, "errors": e.error_count()}},
            )
            configs[key] = ProviderConfig()
    return configs
