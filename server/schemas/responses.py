"""Pydantic response models (DTOs) for FastAPI endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProviderAnswerDTO(CamelDTO):
    provider: str
    model: str
    text: str
    latency_ms: int
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def from_answer(cls, answer):
        """Convert ProviderAnswer to DTO."""
        return cls.model_validate(answer.to_dict())


class SourceDTO(CamelDTO):
    id: int
    title: str
    url: str
    snippet: str


class FactDTO(CamelDTO):
    id: int
    text: str
    providers: list[str]


class SummarySentenceDTO(CamelDTO):
    text: str
    citations: list[int] = Field(default_factory=list)
    confidence: int = 0


class SummaryDTO(CamelDTO):
    final_answer: str
    key_facts: list[str] = Field(default_factory=list)
    sentences: list[SummarySentenceDTO] = Field(default_factory=list)
    disagreements: list[str] = Field(default_factory=list)
    sources: list[SourceDTO] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary):
        return cls.model_validate(summary.to_dict())


class QueryResponseDTO(CamelDTO):
    ok: bool = True
    results: list[ProviderAnswerDTO]
    snippets: list[SourceDTO]
    used_retrieval: bool

    @classmethod
    def from_fan_out(cls, fan_out):
        """Convert FanOutResult to DTO."""
        return cls(
            results=[ProviderAnswerDTO.from_answer(a) for a in fan_out.answers],
            snippets=[SourceDTO.model_validate(s.to_dict()) for s in fan_out.sources],
            used_retrieval=fan_out.used_retrieval,
        )


class RunResponseDTO(CamelDTO):
    request_group_id: str
    results: list[ProviderAnswerDTO]
    sources: list[SourceDTO]
    used_retrieval: bool
    facts: list[FactDTO]
    summary: SummaryDTO

    @classmethod
    def from_run_result(cls, run):
        return cls.model_validate(run.to_dict())


class ExpandResponseDTO(CamelDTO):
    results: list[ProviderAnswerDTO]


class ProviderStatusDTO(CamelDTO):
    configured: bool
    models: Optional[list[str]] = None


class ConfigResponseDTO(CamelDTO):
    ok: bool = True
    status: dict[str, ProviderStatusDTO]


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
