"""Chat and dictionary services with a fake provider."""

import asyncio

import pytest

from conftest import answer
from core.entities import ConnectionCheck, ProviderError
from model.api import ChatMessageIn, ChatOptions, ChatRequest
from service.chat_service import ChatService
from service.dictionary_service import DictionaryService
from util.enums import ProviderErrorKind
from util.errors import AppError, ProviderConfigurationError


def _unconfigured():
    raise ProviderConfigurationError("Gemini API key is required", "gemini")


class TestChatService:
    def test_message_order(self, cfg, fake_provider):
        service = ChatService(lambda: fake_provider, cfg)
        request = ChatRequest(
            message="And udok?",
            conversation=[
                ChatMessageIn(role="user", content="What is ghar?"),
                ChatMessageIn(role="assistant", content="A house."),
            ],
        )
        messages = service.build_messages(request)
        assert [m.role for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[0].content == cfg.DEFAULT_SYSTEM_PROMPT
        assert messages[-1].content == "And udok?"

    def test_custom_system_prompt(self, cfg, fake_provider):
        service = ChatService(lambda: fake_provider, cfg)
        request = ChatRequest(message="hi", options=ChatOptions(systemPrompt="Answer in Konkani."))
        assert service.build_messages(request)[0].content == "Answer in Konkani."

    def test_options_defaults_and_zero_temperature(self, cfg, fake_provider):
        service = ChatService(lambda: fake_provider, cfg)
        defaults = service.build_options(ChatRequest(message="hi"))
        assert defaults.temperature == cfg.DEFAULT_TEMPERATURE
        assert defaults.max_output_tokens == cfg.DEFAULT_MAX_TOKENS
        assert defaults.model is None

        zero = service.build_options(
            ChatRequest(message="hi", options=ChatOptions(temperature=0, model="gpt-4"))
        )
        assert zero.temperature == 0
        assert zero.model == "gpt-4"

    def test_chat_returns_answer(self, cfg, fake_provider):
        fake_provider.results = [answer("Udok means water.")]
        result = asyncio.run(ChatService(lambda: fake_provider, cfg).chat(ChatRequest(message="udok?")))
        assert result.text == "Udok means water."

    def test_chat_configuration_failure(self, cfg):
        result = asyncio.run(ChatService(_unconfigured, cfg).chat(ChatRequest(message="udok?")))
        assert isinstance(result, ProviderError)
        assert result.kind == ProviderErrorKind.CONFIGURATION

    def test_status(self, cfg, fake_provider):
        cfg.ENABLE_LLM = False
        status = ChatService(lambda: fake_provider, cfg).status()
        assert status.enableLLM is False
        assert status.currentProvider is None

    def test_providers_mark_current(self, cfg, fake_provider):
        cfg.LLM_PROVIDER = "anthropic"
        providers = ChatService(lambda: fake_provider, cfg).providers().providers
        current = [p.name for p in providers if p.current]
        assert current == ["anthropic"]
        assert {p.name for p in providers} == {"openai", "anthropic", "gemini", "ollama"}

    def test_health_reports_failure_detail(self, cfg, fake_provider):
        fake_provider.check = ConnectionCheck(ok=False, provider_id="fake", error="bad key")
        health = asyncio.run(ChatService(lambda: fake_provider, cfg).health())
        assert health.healthy is False
        assert health.details == {"error": "bad key"}

    def test_health_without_provider(self, cfg):
        health = asyncio.run(ChatService(_unconfigured, cfg).health())
        assert health.provider == "gemini"
        assert health.healthy is False


class TestDictionaryService:
    def test_search_without_llm(self, cfg, repository, fake_provider):
        service = DictionaryService(repository, lambda: fake_provider, cfg)
        result = asyncio.run(service.search("ghar", limit=10, offset=0))
        assert result.count == 1
        assert result.llm_used is False
        assert fake_provider.calls == []

    def test_search_with_llm(self, cfg, repository, fake_provider):
        fake_provider.results = [answer("Ghar means house.\nIt is a common noun.")]
        service = DictionaryService(repository, lambda: fake_provider, cfg)
        result = asyncio.run(service.search("ghar", limit=10, offset=0, use_llm=True))

        assert result.llm_used is True
        assert result.llm_summary == "Ghar means house."
        assert result.llm_suggestions.endswith("common noun.")
        messages, options = fake_provider.calls[0]
        assert "ghar: house" in messages[1].content
        assert options.temperature == cfg.DICTIONARY_LLM_TEMPERATURE
        assert options.max_output_tokens == cfg.DICTIONARY_LLM_MAX_TOKENS

    def test_llm_failure_falls_back(self, cfg, repository, fake_provider):
        fake_provider.results = [ProviderError("boom", "fake", ProviderErrorKind.VENDOR, 500)]
        service = DictionaryService(repository, lambda: fake_provider, cfg)
        result = asyncio.run(service.search("ghar", limit=10, offset=0, use_llm=True))
        assert result.llm_used is False
        assert result.count == 1

    def test_llm_disabled_skips_enhancement(self, cfg, repository, fake_provider):
        cfg.ENABLE_LLM = False
        service = DictionaryService(repository, lambda: fake_provider, cfg)
        asyncio.run(service.search("ghar", limit=10, offset=0, use_llm=True))
        assert fake_provider.calls == []

    def test_unconfigured_provider_falls_back(self, cfg, repository):
        service = DictionaryService(repository, _unconfigured, cfg)
        result = asyncio.run(service.search("ghar", limit=10, offset=0, use_llm=True))
        assert result.llm_used is False

    def test_get_missing_entry(self, cfg, repository, fake_provider):
        service = DictionaryService(repository, lambda: fake_provider, cfg)
        with pytest.raises(AppError) as exc:
            asyncio.run(service.get("not-a-uuid"))
        assert exc.value.status_code == 404
        assert exc.value.detail == "Entry not found"

    def test_llm_status(self, cfg, repository, fake_provider):
        status = DictionaryService(repository, lambda: fake_provider, cfg).llm_status()
        assert status.llm_enabled is True
        assert status.current_provider == cfg.LLM_PROVIDER
        assert "ollama" in status.available_providers
