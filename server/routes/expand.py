"""POST /v1/expand - deepen each provider's previous answer."""

from fastapi import APIRouter, Depends

from models.errors import InputValidationError
from orchestrator.meta_client import MetaClient
from server.dependencies import get_meta_client
from server.schemas.requests import ExpandRequest
from server.schemas.responses import ExpandResponseDTO, ProviderAnswerDTO
from server.utils import bad_request

router = APIRouter(prefix="/v1", tags=["Expand"])


@router.post("/expand", response_model=ExpandResponseDTO)
async def expand(request: ExpandRequest, client: MetaClient = Depends(get_meta_client)):
    try:
        answers = await client.expand(
            request.original_prompt,
            [r.to_answer() for r in request.results],
            request.providers,
            api_keys=request.api_keys,
            provider_configs=request.provider_configs,
            focus=request.focus,
            use_retrieval=request.use_retrieval,
            system_prompt=request.system_prompt,
        )
    except InputValidationError as e:
        raise bad_request(e)

    return ExpandResponseDTO(results=[ProviderAnswerDTO.from_answer(a) for a in answers])
