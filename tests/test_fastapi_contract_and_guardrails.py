"""
Test Suite: FastAPI Contract & Guardrail Validation

Purpose
-------
Validates the public API contract of the meta client HTTP surface WITHOUT
calling real LLM providers, web search or a synthesis model.

What This Test Suite Covers
---------------------------
1. API Health & Availability (`/health`, `/v1/config`)
2. Input Validation
   - Missing prompt or provider list is rejected with 400/422, never 500
3. Wire Contract
   - camelCase request bodies are accepted
   - Response bodies keep their camelCase keys and shapes
4. Runtime Safety Guarantees
   - Per-provider failures come back inside `results`, not as HTTP errors

How These Tests Work
--------------------
- A MetaClient wired with fake provider clients is injected using FastAPI
  dependency overrides
- No synthesis backend is configured, so summaries use deterministic synthesis
"""

import pytest
from fastapi.testclient import TestClient

from api.base_client import BaseAIClient
from models.provider_answer import ProviderAnswer, ProviderName
from orchestrator.credentials import CredentialResolver
from orchestrator.meta_client import MetaClient
from orchestrator.multi_orchestrator import MultiModelOrchestrator
from orchestrator.provider_registry import ProviderRegistry
from server.app import create_app

pytestmark = pytest.mark.integration


# -------------------------------------------------------------------
# Fake provider client (keeps tests offline & deterministic)
# -------------------------------------------------------------------


class FakeProviderClient(BaseAIClient):
    TEXTS = {
        "openai": "The tower has 60 floors.",
        "anthropic": "The tower has 60 floors total.",
        "gemini": "Construction began in 2005.",
        "xai": "The tower is in the city center.",
    }

    def __init__(self, provider: str):
        self.provider = provider

    async def get_completion(self, request):
        return ProviderAnswer(
            provider=self.provider,
            model=request.model or "fake-model",
            text=self.TEXTS[self.provider],
            latency_ms=7,
        )


def fake_meta_client() -> MetaClient:
    registry = ProviderRegistry(
        factories={
            name: (lambda p: lambda *args: FakeProviderClient(p))(name.value) for name in ProviderName
        }
    )
    orchestrator = MultiModelOrchestrator(
        registry=registry,
        credentials=CredentialResolver(fallback={"openai": "k", "anthropic": "k", "gemini": "k"}),
    )
    return MetaClient(orchestrator=orchestrator)


# -------------------------------------------------------------------
# Pytest fixtures
# -------------------------------------------------------------------


@pytest.fixture()
def app():
    """
    Build FastAPI app and override the pipeline dependency.
    """
    app = create_app()

    from server import dependencies as deps

    app.dependency_overrides[deps.get_meta_client] = fake_meta_client
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


# -------------------------------------------------------------------
# Tests
# -------------------------------------------------------------------


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.json()["status"] == "healthy"


def test_config_reports_configured_flags(client, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")

    r = client.get("/v1/config")

    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["status"]["anthropic"] == {"configured": True}
    assert body["status"]["gemini"] == {"configured": False}
    assert body["status"]["openai"] == {"configured": False, "models": []}


def test_query_returns_results_in_order(client):
    r = client.post(
        "/v1/query",
        json={
            "prompt": "How tall is the tower?",
            "providers": ["gemini", "openai", "xai"],
            "providerConfigs": {"openai": {"model": "gpt-4o"}},
        },
    )

    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["usedRetrieval"] is False
    assert body["snippets"] == []
    assert [res["provider"] for res in body["results"]] == ["gemini", "openai", "xai"]
    assert body["results"][1]["model"] == "gpt-4o"
    assert body["results"][2]["errorCode"] == "missing_credential"
    assert set(body["results"][0]) == {"provider", "model", "text", "latencyMs", "error", "errorCode"}


def test_query_caller_key_used(client):
    r = client.post(
        "/v1/query",
        json={"prompt": "Where?", "providers": ["xai"], "apiKeys": {"xai": "caller-key"}},
    )
    assert r.status_code == 200
    assert r.json()["results"][0]["error"] is None


@pytest.mark.parametrize(
    "payload",
    [
        {"providers": ["openai"]},
        {"prompt": "", "providers": ["openai"]},
        {"prompt": "   ", "providers": ["openai"]},
        {"prompt": "hello"},
        {"prompt": "hello", "providers": []},
    ],
)
@pytest.mark.parametrize("path", ["/v1/query", "/v1/run"])
def test_invalid_input_rejected(client, path, payload):
    r = client.post(path, json=payload)
    assert r.status_code in (400, 422)


def test_unknown_provider_is_not_an_http_error(client):
    r = client.post("/v1/query", json={"prompt": "hello", "providers": ["mistral"]})
    assert r.status_code == 200
    assert r.json()["results"][0]["errorCode"] == "unknown_provider"


def test_run_full_pipeline(client):
    r = client.post(
        "/v1/run",
        json={"prompt": "How tall is the tower?", "providers": ["openai", "anthropic", "gemini"]},
    )

    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"requestGroupId", "results", "sources", "usedRetrieval", "facts", "summary"}
    assert [f["providers"] for f in body["facts"]] == [["openai", "anthropic"], ["gemini"]]
    summary = body["summary"]
    assert set(summary) == {"finalAnswer", "keyFacts", "sentences", "disagreements", "sources"}
    assert summary["keyFacts"] == ["The tower has 60 floors."]


def test_meta_summary_over_supplied_answers(client):
    r = client.post(
        "/v1/meta-summary",
        json={
            "prompt": "How tall is the tower?",
            "results": [
                {"provider": "openai", "model": "gpt-4.1", "text": "The tower has 60 floors.", "latencyMs": 3},
                {"provider": "gemini", "model": "g", "text": "", "latencyMs": 0, "error": "boom"},
            ],
            "sources": [{"id": 1, "title": "A", "url": "https://a", "content": "evidence"}],
        },
    )

    assert r.status_code == 200
    body = r.json()
    assert body["keyFacts"] == ["The tower has 60 floors."]
    assert body["sources"] == [{"id": 1, "title": "A", "url": "https://a", "snippet": "evidence"}]
    assert "- gemini: boom" in body["finalAnswer"]


def test_meta_summary_requires_results(client):
    r = client.post("/v1/meta-summary", json={"prompt": "hello"})
    assert r.status_code == 422


def test_expand(client):
    r = client.post(
        "/v1/expand",
        json={
            "originalPrompt": "How tall is the tower?",
            "results": [{"provider": "openai", "model": "m", "text": "60 floors", "latencyMs": 1}],
            "providers": ["openai", "xai"],
            "focus": "size",
        },
    )

    assert r.status_code == 200
    results = r.json()["results"]
    assert [res["provider"] for res in results] == ["openai", "xai"]
    assert results[0]["text"] == "The tower has 60 floors."
    assert results[1]["errorCode"] == "missing_credential"


def test_expand_requires_original_prompt(client):
    r = client.post("/v1/expand", json={"providers": ["openai"]})
    assert r.status_code in (400, 422)


def test_run_never_returns_500(client):
    r = client.post(
        "/v1/run",
        json={
            "prompt": "Explain async/await",
            "providers": ["openai", "nope", "xai"],
            "providerConfigs": {"openai": {"temperature": "very hot"}, "xai": 5},
        },
    )
    assert r.status_code < 500
