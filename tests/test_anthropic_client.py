"""Tests for the httpx-based Anthropic adapter (MockTransport, no network)."""

import asyncio
import json

import httpx

from api.anthropic_client import ANTHROPIC_API_URL, AnthropicClient
from models.provider_answer import CALL_FAILED, ProviderRequest


def client_with(handler, model_name=None):
    return AnthropicClient("sk-ant-test", model_name=model_name, transport=httpx.MockTransport(handler))


def test_text_blocks_joined():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "content": [
                    {"type": "text", "text": "The tower has 60 floors."},
                    {"type": "tool_use", "id": "x"},
                    {"type": "text", "text": "It opened in 2009."},
                ]
            },
        )

    answer = asyncio.run(
        client_with(handler).get_completion(
            ProviderRequest(prompt=" How tall? ", system_prompt="Be brief.", max_tokens=200)
        )
    )

    assert answer.is_success
    assert answer.provider == "anthropic"
    assert answer.model == "claude-sonnet-4-5"
    assert answer.text == "The tower has 60 floors.\nIt opened in 2009."

    request = seen[0]
    assert str(request.url) == ANTHROPIC_API_URL
    assert request.headers["x-api-key"] == "sk-ant-test"
    body = json.loads(request.content)
    assert body["system"] == "Be brief."
    assert body["messages"] == [{"role": "user", "content": "How tall?"}]
    assert body["max_tokens"] == 200
    assert body["temperature"] == 0.2


def test_http_error_becomes_error_answer():
    def handler(request):
        return httpx.Response(401, text="invalid x-api-key")

    answer = asyncio.run(client_with(handler).get_completion(ProviderRequest(prompt="hi")))

    assert answer.error == "Anthropic 401: invalid x-api-key"
    assert answer.error_code == CALL_FAILED
    assert answer.text == ""


def test_empty_content_is_an_error():
    def handler(request):
        return httpx.Response(200, json={"content": []})

    answer = asyncio.run(client_with(handler).get_completion(ProviderRequest(prompt="hi")))

    assert answer.is_error
    assert answer.error_code == CALL_FAILED


def test_transport_failure_never_raises():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    answer = asyncio.run(client_with(handler, model_name="claude-x").get_completion(ProviderRequest(prompt="hi")))

    assert answer.model == "claude-x"
    assert answer.error.startswith("Anthropic call failed:")
