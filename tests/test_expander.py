"""Tests for AnswerExpander."""

import asyncio

import pytest

from api.base_client import BaseAIClient
from models.errors import InputValidationError
from models.provider_answer import MISSING_CREDENTIAL, UNKNOWN_PROVIDER, ProviderAnswer, ProviderName
from orchestrator.credentials import CredentialResolver
from orchestrator.expander import (
    EXPAND_MAX_TOKENS,
    EXPAND_TEMPERATURE,
    AnswerExpander,
    build_expand_prompt,
    focus_instructions,
)
from orchestrator.multi_orchestrator import MultiModelOrchestrator
from orchestrator.provider_registry import ProviderRegistry
from tools.web.contracts import RetrievalSource


class RecordingClient(BaseAIClient):
    """Minimal adapter double: records requests and echoes a canned answer."""

    def __init__(self, provider: str):
        self.provider = provider
        self.requests = []

    async def get_completion(self, request):
        self.requests.append(request)
        return ProviderAnswer(provider=self.provider, model="m", text="More detail.", latency_ms=1)


class StaticRetriever:
    def __init__(self, sources):
        self.sources = sources

    async def search(self, query, max_results=6):
        return list(self.sources)


def build_expander(clients, keys, retriever=None):
    registry = ProviderRegistry(
        factories={name: (lambda c: lambda *args: c)(client) for name, client in clients.items()}
    )
    orchestrator = MultiModelOrchestrator(
        registry=registry,
        credentials=CredentialResolver(fallback=keys),
        retriever=retriever,
    )
    return AnswerExpander(orchestrator)


PREVIOUS = [
    ProviderAnswer("openai", "gpt-4.1", "The tower has 60 floors.", 10),
    ProviderAnswer("gemini", "gemini-2.5-flash", "The tower opened in 2009.", 12),
]


def test_focus_instructions():
    assert "quantitative specs" in focus_instructions("SIZE")
    assert "timeline" in focus_instructions("timeline")
    assert focus_instructions("unknown") == focus_instructions("general")
    assert focus_instructions(None) == focus_instructions("general")


def test_gemini_gets_new_facts_instruction():
    gemini_prompt = build_expand_prompt("How tall?", "old", "general", "gemini")
    openai_prompt = build_expand_prompt("How tall?", "old", "general", "openai")
    assert "Only add NEW factual details" in gemini_prompt
    assert "Only add NEW factual details" not in openai_prompt


def test_expand_prompt_contains_previous_answer():
    prompt = build_expand_prompt("How tall?", None, "team", "openai")
    assert "Original question:\nHow tall?" in prompt
    assert "Your previous answer:\n(none)" in prompt
    assert "who built it" in prompt


def test_expand_uses_previous_answers_and_defaults():
    openai = RecordingClient("openai")
    gemini = RecordingClient("gemini")
    expander = build_expander(
        {ProviderName.OPENAI: openai, ProviderName.GEMINI: gemini},
        keys={"openai": "k1", "gemini": "k2"},
    )

    answers = asyncio.run(expander.expand("How tall?", PREVIOUS, ["gemini", "openai"], focus="size"))

    assert [a.provider for a in answers] == ["gemini", "openai"]
    request = openai.requests[0]
    assert "The tower has 60 floors." in request.prompt
    assert request.temperature == EXPAND_TEMPERATURE
    assert request.max_tokens == EXPAND_MAX_TOKENS
    assert request.system_prompt is None
    assert "The tower opened in 2009." in gemini.requests[0].prompt


def test_expand_config_overrides_defaults():
    openai = RecordingClient("openai")
    expander = build_expander({ProviderName.OPENAI: openai}, keys={"openai": "k1"})

    asyncio.run(
        expander.expand(
            "How tall?",
            PREVIOUS,
            ["openai"],
            provider_configs={"openai": {"temperature": 0.9, "maxTokens": 50}},
        )
    )

    assert openai.requests[0].temperature == 0.9
    assert openai.requests[0].max_tokens == 50


def test_retrieval_goes_into_system_prompt():
    openai = RecordingClient("openai")
    retriever = StaticRetriever(
        [RetrievalSource(id=1, title="Records", url="https://example.com", snippet="60 floors")]
    )
    expander = build_expander({ProviderName.OPENAI: openai}, keys={"openai": "k1"}, retriever=retriever)

    asyncio.run(
        expander.expand(
            "How tall?", PREVIOUS, ["openai"], use_retrieval=True, system_prompt="Be precise."
        )
    )

    request = openai.requests[0]
    assert request.system_prompt.startswith("Be precise.\n\nWEB EVIDENCE")
    assert "Source [1] Records (https://example.com)\n60 floors" in request.system_prompt
    assert "SOURCES (use these" not in request.prompt


def test_expand_error_taxonomy():
    expander = build_expander({ProviderName.OPENAI: RecordingClient("openai")}, keys={})

    answers = asyncio.run(expander.expand("How tall?", PREVIOUS, ["openai", "cohere"]))

    assert answers[0].error_code == MISSING_CREDENTIAL
    assert answers[1].error_code == UNKNOWN_PROVIDER


def test_missing_original_prompt_rejected():
    expander = build_expander({}, keys={})
    with pytest.raises(InputValidationError):
        asyncio.run(expander.expand("  ", PREVIOUS, ["openai"]))
