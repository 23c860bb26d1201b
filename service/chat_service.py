# service/chat_service.py
import logging
from typing import Callable
from config.settings import Settings, settings as app_settings
from core.entities import ChatMessage, GenerationOptions, ProviderError, ProviderResult
from core.llm_provider import LLMProvider
from core.provider_registry import (
    available_providers,
    create_provider,
    models_for,
    provider_or_error,
)
from model.api import (
    ChatRequest,
    LLMStatusResponse,
    ProviderHealthResponse,
    ProviderInfo,
    ProvidersResponse,
)

logger = logging.getLogger(__name__)


class ChatService:
    """
    Service forwarding chat turns to the configured provider. The provider is
    fixed by settings; requests can pick a model but never switch vendors.
    """

    def __init__(
        self,
        provider_factory: Callable[[], LLMProvider] = create_provider,
        cfg: Settings = app_settings,
    ) -> None:
        self._factory = provider_factory
        self._cfg = cfg

    @property
    def enabled(self) -> bool:
        return self._cfg.ENABLE_LLM

    @property
    def current_provider(self) -> str:
        return self._cfg.LLM_PROVIDER

    def build_messages(self, request: ChatRequest) -> list[ChatMessage]:
        system = request.options.systemPrompt or self._cfg.DEFAULT_SYSTEM_PROMPT
        history = [ChatMessage(role=m.role, content=m.content) for m in request.conversation]
        return [
            ChatMessage(role="system", content=system),
            *history,
            ChatMessage(role="user", content=request.message),
        ]

    def build_options(self, request: ChatRequest) -> GenerationOptions:
        opts = request.options
        return GenerationOptions(
            model=opts.model or None,
            temperature=(
                opts.temperature
                if opts.temperature is not None
                else self._cfg.DEFAULT_TEMPERATURE
            ),
            max_output_tokens=opts.maxTokens or self._cfg.DEFAULT_MAX_TOKENS,
        )

    async def chat(self, request: ChatRequest) -> ProviderResult:
        provider = provider_or_error(self._factory)
        if isinstance(provider, ProviderError):
            return provider

        messages = self.build_messages(request)
        logger.info(
            "chat.start provider=%s turns=%d", provider.provider_id, len(messages)
        )
        result = await provider.generate_response(messages, self.build_options(request))
        if isinstance(result, ProviderError):
            logger.warning(
                "chat.failed provider=%s kind=%s", result.provider_id, result.kind.value
            )
        return result

    def status(self) -> LLMStatusResponse:
        return LLMStatusResponse(
            enableLLM=self.enabled,
            currentProvider=self.current_provider if self.enabled else None,
        )

    def providers(self) -> ProvidersResponse:
        return ProvidersResponse(
            providers=[
                ProviderInfo(
                    name=name,
                    current=name == self.current_provider,
                    models=models_for(name, self._cfg),
                )
                for name in available_providers()
            ]
        )

    async def health(self) -> ProviderHealthResponse:
        provider = provider_or_error(self._factory)
        if isinstance(provider, ProviderError):
            return ProviderHealthResponse(
                provider=provider.provider_id,
                healthy=False,
                details={"error": provider.message},
            )
        check = await provider.validate_connection()
        details = dict(check.detail)
        if check.error:
            details["error"] = check.error
        return ProviderHealthResponse(
            provider=provider.provider_name, healthy=check.ok, details=details
        )
