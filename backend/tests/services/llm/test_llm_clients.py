"""
Tests for the Ollama and Groq HTTP clients against a mocked transport.
"""

import asyncio
import json

import httpx

from pharmaguard.services.llm.groq_client import GROQ_API_URL, GroqClient
from pharmaguard.services.llm.ollama_client import OllamaClient


def _run_with_transport(handler, make_client, prompt="prompt", system="system"):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = make_client(http)
            return await client.generate_text(prompt, system=system)
    return asyncio.run(run())


class TestOllamaClient:

    def test_successful_generation(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": '{"summary": "ok"}'})

        text = _run_with_transport(
            handler, lambda http: OllamaClient(base_url="http://ollama:11434/", model="llama3", http_client=http)
        )

        assert text == '{"summary": "ok"}'
        assert seen["url"] == "http://ollama:11434/api/generate"
        assert seen["body"]["model"] == "llama3"
        assert seen["body"]["format"] == "json"
        assert seen["body"]["stream"] is False
        assert seen["body"]["system"] == "system"

    def test_client_error_returns_none(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, json={"error": "model not found"})

        text = _run_with_transport(handler, lambda http: OllamaClient(http_client=http))

        assert text is None
        # 4xx is not retried
        assert len(calls) == 1

    def test_connection_error_returns_none(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert _run_with_transport(handler, lambda http: OllamaClient(http_client=http)) is None


class TestGroqClient:

    def test_successful_generation(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "{}"}}]})

        text = _run_with_transport(handler, lambda http: GroqClient(api_key="secret", http_client=http))

        assert text == "{}"
        assert seen["url"] == GROQ_API_URL
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["messages"][0] == {"role": "system", "content": "system"}
        assert seen["body"]["response_format"] == {"type": "json_object"}

    def test_missing_api_key_skips_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        assert _run_with_transport(handler, lambda http: GroqClient(api_key="", http_client=http)) is None
        assert calls == []

    def test_unexpected_shape_returns_none(self):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        assert _run_with_transport(handler, lambda http: GroqClient(api_key="k", http_client=http)) is None
