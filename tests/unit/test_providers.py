"""
Provider Adapter Tests
========================

Vendor wire formats exercised through httpx.MockTransport: request shape,
normalized answers, zero-filled usage and failures returned as values.
"""

import asyncio
import json

import httpx
import pytest

from core.anthropic_provider import AnthropicProvider, split_system
from core.entities import CandidateAnswer, ChatMessage, GenerationOptions, ProviderError
from core.gemini_provider import GeminiProvider, from_gemini_content, to_gemini_contents
from core.llm_provider import LLMProvider, ProviderConfig, usage_from_counts
from core.ollama_provider import OllamaProvider
from core.openai_provider import OpenAIProvider
from util.enums import ProviderErrorKind
from util.errors import ProviderConfigurationError

MESSAGES = [
    ChatMessage(role="system", content="Be brief."),
    ChatMessage(role="user", content="What is ghar?"),
    ChatMessage(role="assistant", content="A house."),
    ChatMessage(role="user", content="And udok?"),
]


def _config(provider_id: str, base_url: str, **kw) -> ProviderConfig:
    defaults = dict(
        provider_id=provider_id,
        base_url=base_url,
        default_model=f"{provider_id}-default",
        api_key="k-123",
        models=(f"{provider_id}-default",),
        timeout=5.0,
    )
    defaults.update(kw)
    return ProviderConfig(**defaults)


def _transport(handler, seen: list) -> httpx.MockTransport:
    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    return httpx.MockTransport(_record)


def _timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("too slow", request=request)


def _refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


class TestUsage:
    def test_zero_fills_missing_counters(self):
        usage = usage_from_counts()
        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (0, 0, 0)

    def test_derives_total(self):
        assert usage_from_counts(4, 6).total_tokens == 10

    def test_ignores_garbage(self):
        assert usage_from_counts("x", None, None).prompt_tokens == 0


class TestOpenAIProvider:
    BASE = "https://api.openai.test/v1"

    def test_normalizes_answer(self):
        seen: list = []

        def handler(request):
            return httpx.Response(
                200,
                json={
                    "model": "gpt-test",
                    "choices": [{"message": {"role": "assistant", "content": "Water."}}],
                    "usage": {"prompt_tokens": 7, "completion_tokens": 2, "total_tokens": 9},
                },
            )

        provider = OpenAIProvider(_config("openai", self.BASE), transport=_transport(handler, seen))
        result = asyncio.run(
            provider.generate_response(MESSAGES, GenerationOptions(temperature=0.0))
        )

        assert isinstance(result, CandidateAnswer)
        assert result.text == "Water."
        assert result.model_id == "gpt-test"
        assert result.usage.total_tokens == 9

        request = seen[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer k-123"
        body = json.loads(request.content)
        assert body["model"] == "openai-default"
        assert body["temperature"] == 0.0
        assert [m["role"] for m in body["messages"]] == ["system", "user", "assistant", "user"]

    def test_missing_usage_is_zero_filled(self):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        provider = OpenAIProvider(_config("openai", self.BASE), transport=_transport(handler, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert result.usage.total_tokens == 0
        assert result.model_id == "openai-default"

    def test_vendor_error_is_a_value(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        provider = OpenAIProvider(_config("openai", self.BASE), transport=_transport(handler, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert isinstance(result, ProviderError)
        assert result.kind == ProviderErrorKind.VENDOR
        assert result.status_code == 429
        assert result.message == "Rate limit reached"

    def test_timeout_is_a_value(self):
        provider = OpenAIProvider(_config("openai", self.BASE), transport=_transport(_timeout, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert result.ok is False
        assert result.kind == ProviderErrorKind.TIMEOUT

    def test_malformed_body(self):
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        provider = OpenAIProvider(_config("openai", self.BASE), transport=_transport(handler, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert result.kind == ProviderErrorKind.RESPONSE

    def test_requires_api_key(self):
        with pytest.raises(ProviderConfigurationError):
            OpenAIProvider(_config("openai", self.BASE, api_key=None))

    def test_validate_connection_counts_models(self):
        seen: list = []

        def handler(request):
            return httpx.Response(200, json={"data": [{"id": "a"}, {"id": "b"}]})

        provider = OpenAIProvider(_config("openai", self.BASE), transport=_transport(handler, seen))
        check = asyncio.run(provider.validate_connection())
        assert check.ok is True
        assert check.detail == {"modelsCount": 2}
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/v1/models"

    def test_satisfies_protocol(self):
        assert isinstance(OpenAIProvider(_config("openai", self.BASE)), LLMProvider)


class TestAnthropicProvider:
    BASE = "https://api.anthropic.test/v1"

    def test_split_system_lifts_system_text(self):
        system, turns = split_system(MESSAGES)
        assert system == "Be brief."
        assert [t["role"] for t in turns] == ["user", "assistant", "user"]

    def test_split_system_default(self):
        system, _ = split_system([ChatMessage(role="user", content="hi")])
        assert system == "You are a helpful AI assistant."

    def test_normalizes_answer(self):
        seen: list = []

        def handler(request):
            return httpx.Response(
                200,
                json={
                    "model": "claude-test",
                    "content": [
                        {"type": "text", "text": "Udok "},
                        {"type": "text", "text": "means water."},
                    ],
                    "usage": {"input_tokens": 4, "output_tokens": 6},
                },
            )

        cfg = _config("anthropic", self.BASE, extra_headers={"anthropic-version": "2023-06-01"})
        provider = AnthropicProvider(cfg, transport=_transport(handler, seen))
        result = asyncio.run(provider.generate_response(MESSAGES))

        assert result.text == "Udok means water."
        assert result.usage.prompt_tokens == 4
        assert result.usage.completion_tokens == 6
        assert result.usage.total_tokens == 10

        request = seen[0]
        assert request.url.path == "/v1/messages"
        assert request.headers["x-api-key"] == "k-123"
        assert request.headers["anthropic-version"] == "2023-06-01"
        body = json.loads(request.content)
        assert body["system"] == "Be brief."
        assert all(m["role"] != "system" for m in body["messages"])

    def test_missing_text_block(self):
        def handler(request):
            return httpx.Response(200, json={"content": []})

        provider = AnthropicProvider(_config("anthropic", self.BASE), transport=_transport(handler, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert result.kind == ProviderErrorKind.RESPONSE

    def test_validate_connection_rejected_key(self):
        def handler(request):
            return httpx.Response(
                401, json={"type": "error", "error": {"message": "invalid x-api-key"}}
            )

        provider = AnthropicProvider(_config("anthropic", self.BASE), transport=_transport(handler, []))
        check = asyncio.run(provider.validate_connection())
        assert check.ok is False
        assert check.error == "invalid x-api-key"


class TestGeminiProvider:
    BASE = "https://gemini.test/v1beta"

    def test_system_folds_into_first_user_turn(self):
        contents = to_gemini_contents(MESSAGES)
        assert [c["role"] for c in contents] == ["user", "model", "user"]
        assert contents[0]["parts"][0]["text"] == "Be brief.\n\nWhat is ghar?"

    def test_system_only_becomes_user_turn(self):
        contents = to_gemini_contents([ChatMessage(role="system", content="Be brief.")])
        assert contents == [{"role": "user", "parts": [{"text": "Be brief."}]}]

    def test_model_role_maps_back_to_assistant(self):
        msg = from_gemini_content({"role": "model", "parts": [{"text": "Hi"}, {"text": "!"}]})
        assert msg.role == "assistant"
        assert msg.content == "Hi!"

    def test_normalizes_answer_without_usage(self):
        seen: list = []

        def handler(request):
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"role": "model", "parts": [{"text": "Water."}]}}]},
            )

        provider = GeminiProvider(_config("gemini", self.BASE), transport=_transport(handler, seen))
        result = asyncio.run(
            provider.generate_response(MESSAGES, GenerationOptions(max_output_tokens=50))
        )

        assert result.text == "Water."
        assert result.model_id == "gemini-default"
        assert result.usage.total_tokens == 0

        request = seen[0]
        assert request.url.path == "/v1beta/models/gemini-default:generateContent"
        assert request.url.params["key"] == "k-123"
        body = json.loads(request.content)
        assert body["generationConfig"]["maxOutputTokens"] == 50

    def test_empty_candidates(self):
        def handler(request):
            return httpx.Response(200, json={"candidates": []})

        provider = GeminiProvider(_config("gemini", self.BASE), transport=_transport(handler, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert result.kind == ProviderErrorKind.RESPONSE


class TestOllamaProvider:
    BASE = "http://ollama.test:11434"

    def test_normalizes_answer(self):
        seen: list = []

        def handler(request):
            return httpx.Response(
                200,
                json={
                    "model": "llama2",
                    "message": {"role": "assistant", "content": "Water."},
                    "prompt_eval_count": 2,
                    "eval_count": 3,
                },
            )

        provider = OllamaProvider(_config("ollama", self.BASE, api_key=None), transport=_transport(handler, seen))
        result = asyncio.run(provider.generate_response(MESSAGES))

        assert result.text == "Water."
        assert result.usage.total_tokens == 5
        body = json.loads(seen[0].content)
        assert seen[0].url.path == "/api/chat"
        assert body["stream"] is False
        assert body["options"]["num_predict"] == 1000

    def test_unreachable_server(self):
        provider = OllamaProvider(_config("ollama", self.BASE), transport=_transport(_refused, []))
        result = asyncio.run(provider.generate_response(MESSAGES))
        assert result.kind == ProviderErrorKind.TRANSPORT

    def test_validate_connection_lists_tags(self):
        def handler(request):
            return httpx.Response(200, json={"models": [{"name": "llama2"}]})

        provider = OllamaProvider(_config("ollama", self.BASE), transport=_transport(handler, []))
        check = asyncio.run(provider.validate_connection())
        assert check.ok is True
        assert check.detail == {"modelsCount": 1}
