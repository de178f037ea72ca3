"""Pydantic request models for FastAPI endpoints."""

from typing import Any, Optional, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.provider_answer import ProviderAnswer
from tools.web.contracts import RetrievalSource


class CamelModel(BaseModel):
    """Accepts the camelCase wire names as well as the snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProviderAnswerRequest(CamelModel):
    provider: str
    model: str = ""
    text: str = ""
    latency_ms: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None

    def to_answer(self) -> ProviderAnswer:
        return ProviderAnswer(
            provider=self.provider,
            model=self.model,
            text=self.text,
            latency_ms=self.latency_ms,
            error=self.error or None,
            error_code=self.error_code,
        )


class SourceRequest(CamelModel):
    id: int
    title: str = ""
    url: str = ""
    snippet: str = ""
    content: Optional[str] = None

    def to_source(self) -> RetrievalSource:
        return RetrievalSource(
            id=self.id,
            title=self.title.strip(),
            url=self.url.strip(),
            snippet=(self.snippet or self.content or "").strip(),
        )


class QueryRequest(CamelModel):
    prompt: str = Field(..., min_length=1)
    providers: List[str] = Field(..., min_length=1)
    api_keys: Optional[dict[str, str]] = None
    # validated per provider in config.provider_config; bad entries fall back to defaults
    provider_configs: Optional[dict[str, Any]] = None
    use_retrieval: bool = False
    system_prompt: Optional[str] = None


class RunRequest(QueryRequest):
    pass


class MetaSummaryRequest(CamelModel):
    prompt: str = Field(..., min_length=1)
    results: List[ProviderAnswerRequest]
    sources: List[SourceRequest] = Field(default_factory=list)


class ExpandRequest(CamelModel):
    original_prompt: str = Field(..., min_length=1)
    results: List[ProviderAnswerRequest] = Field(default_factory=list)
    providers: List[str] = Field(..., min_length=1)
    api_keys: Optional[dict[str, str]] = None
    provider_configs: Optional[dict[str, Any]] = None
    focus: str = "general"
    use_retrieval: bool = False
    system_prompt: Optional[str] = None
