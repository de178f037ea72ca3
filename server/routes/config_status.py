"""GET /v1/config - which providers have a server-side credential."""

from fastapi import APIRouter, Depends

from api.openai_client import OpenAIClient
from config.config import Config
from server.dependencies import get_config
from server.schemas.responses import ConfigResponseDTO, ProviderStatusDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Config"])


async def list_openai_models(api_key: str) -> list[str]:
    """OpenAI chat model ids for the UI picker; [] when listing fails."""
    try:
        async with OpenAIClient(api_key) as client:
            return await client.list_models()
    except Exception as e:
        logger.warning(
            f"OpenAI model listing failed: {e}",
            extra={"extra_fields": {"error_type": type(e).__name__}},
        )
        return []


@router.get("/config", response_model=ConfigResponseDTO, response_model_exclude_none=True)
async def config_status(config: Config = Depends(get_config)):
    """Report the configured flag per provider (never the credential itself)."""
    status = {
        provider: ProviderStatusDTO(configured=configured)
        for provider, configured in config.provider_status().items()
    }

    openai_key = config.PROVIDER_API_KEYS.get("openai", "")
    status["openai"] = ProviderStatusDTO(
        configured=bool(openai_key),
        models=await list_openai_models(openai_key) if openai_key else [],
    )
    return ConfigResponseDTO(status=status)
