"""End-to-end pipeline tests: fan-out, aggregation and synthesis with fakes."""

import json

from api.base_client import BaseAIClient
from models.provider_answer import ProviderAnswer, ProviderName
from orchestrator.credentials import CredentialResolver
from orchestrator.meta_client import MetaClient
from orchestrator.multi_orchestrator import MultiModelOrchestrator
from orchestrator.provider_registry import ProviderRegistry
from synthesis.meta_summarizer import MetaSummarizer
from tools.web.contracts import RetrievalSource


class CannedClient(BaseAIClient):
    def __init__(self, provider: str, text: str):
        self.provider = provider
        self.text = text

    async def get_completion(self, request):
        return ProviderAnswer(provider=self.provider, model="m", text=self.text, latency_ms=5)


class CannedBackend:
    name = "canned"

    def __init__(self, output: str):
        self.output = output

    async def complete(self, system: str, user: str) -> str:
        return self.output


class CannedRetriever:
    def __init__(self, sources):
        self.sources = sources

    async def search(self, query, max_results=6):
        return list(self.sources)


def build_client(texts: dict, keys: dict, backend=None, retriever=None) -> MetaClient:
    registry = ProviderRegistry(
        factories={
            ProviderName(name): (lambda c: lambda *args: c)(CannedClient(name, text))
            for name, text in texts.items()
        }
    )
    orchestrator = MultiModelOrchestrator(
        registry=registry, credentials=CredentialResolver(fallback=keys), retriever=retriever
    )
    return MetaClient(orchestrator=orchestrator, summarizer=MetaSummarizer(backend=backend))


def test_run_produces_facts_and_summary():
    client = build_client(
        {
            "openai": "The tower has 60 floors.",
            "anthropic": "The tower has 60 floors total.",
            "gemini": "Construction began in 2005.",
        },
        keys={"openai": "k", "anthropic": "k", "gemini": "k"},
    )

    run = client.run_sync("How tall is the tower?", ["openai", "anthropic", "gemini"])

    assert [a.provider for a in run.answers] == ["openai", "anthropic", "gemini"]
    assert [len(f.providers) for f in run.facts] == [2, 1]
    assert run.summary.key_facts == ("The tower has 60 floors.",)


def test_every_provider_failed_still_summarizes():
    client = build_client({}, keys={})

    run = client.run_sync("How tall is the tower?", ["openai", "gemini"])

    assert run.fan_out.error_count == 2
    assert run.facts == ()
    assert "nothing could be summarized" in run.summary.final_answer
    assert "- openai: API key not set (client or server)." in run.summary.final_answer


def test_sources_flow_to_summary():
    sources = [
        RetrievalSource(id=1, title="A", url="https://a", snippet="a"),
        RetrievalSource(id=2, title="B", url="https://b", snippet="b"),
        RetrievalSource(id=3, title="C", url="https://c", snippet="c"),
    ]
    backend = CannedBackend(
        json.dumps(
            {
                "finalAnswer": "60 floors.",
                "sentences": [
                    {"text": "The tower has 60 floors.", "citations": [1], "confidence": 80},
                    {"text": "Construction began in 2005.", "citations": [3], "confidence": 50},
                ],
            }
        )
    )
    client = build_client(
        {"openai": "The tower has 60 floors."},
        keys={"openai": "k"},
        backend=backend,
        retriever=CannedRetriever(sources),
    )

    run = client.run_sync("How tall is the tower?", ["openai"], use_retrieval=True)
    data = run.to_dict()

    assert data["usedRetrieval"] is True
    assert [s["id"] for s in data["summary"]["sources"]] == [1, 2, 3]
    assert all(2 not in s["citations"] for s in data["summary"]["sentences"])
    assert set(data) == {"requestGroupId", "results", "sources", "usedRetrieval", "facts", "summary"}
