"""Fan-out, synthesis and full-pipeline endpoints."""

from fastapi import APIRouter, Depends

from models.errors import InputValidationError
from orchestrator.meta_client import MetaClient
from server.dependencies import get_meta_client
from server.schemas.requests import MetaSummaryRequest, QueryRequest, RunRequest
from server.schemas.responses import QueryResponseDTO, RunResponseDTO, SummaryDTO
from server.utils import bad_request, redact_api_keys
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Query"])


@router.post("/query", response_model=QueryResponseDTO)
async def query(request: QueryRequest, client: MetaClient = Depends(get_meta_client)):
    """Send one prompt to every requested provider and return the raw answers."""
    logger.info(
        "Query request received",
        extra={
            "extra_fields": {
                "providers": request.providers,
                "api_keys": redact_api_keys(request.api_keys),
                "use_retrieval": request.use_retrieval,
            }
        },
    )
    try:
        fan_out = await client.orchestrator.fan_out(
            request.prompt,
            request.providers,
            api_keys=request.api_keys,
            provider_configs=request.provider_configs,
            use_retrieval=request.use_retrieval,
            system_prompt=request.system_prompt,
        )
    except InputValidationError as e:
        raise bad_request(e)

    return QueryResponseDTO.from_fan_out(fan_out)


@router.post("/meta-summary", response_model=SummaryDTO)
async def meta_summary(request: MetaSummaryRequest, client: MetaClient = Depends(get_meta_client)):
    """Aggregate and synthesize answers the caller already has."""
    if not request.prompt.strip():
        raise bad_request(InputValidationError("Missing prompt."))

    summary = await client.summarize(
        request.prompt.strip(),
        [r.to_answer() for r in request.results],
        sources=[s.to_source() for s in request.sources],
    )
    return SummaryDTO.from_summary(summary)


@router.post("/run", response_model=RunResponseDTO)
async def run(request: RunRequest, client: MetaClient = Depends(get_meta_client)):
    """Fan-out, fact aggregation and synthesis in one call."""
    logger.info(
        "Run request received",
        extra={
            "extra_fields": {
                "providers": request.providers,
                "api_keys": redact_api_keys(request.api_keys),
                "use_retrieval": request.use_retrieval,
            }
        },
    )
    try:
        result = await client.run(
            request.prompt,
            request.providers,
            api_keys=request.api_keys,
            provider_configs=request.provider_configs,
            use_retrieval=request.use_retrieval,
            system_prompt=request.system_prompt,
        )
    except InputValidationError as e:
        raise bad_request(e)

    return RunResponseDTO.from_run_result(result)
