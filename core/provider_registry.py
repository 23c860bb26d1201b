# core/provider_registry.py
import logging
from typing import Callable, Dict, Optional, Union
import httpx
from config.settings import Settings, settings as app_settings
from core.anthropic_provider import AnthropicProvider
from core.entities import ProviderError
from core.gemini_provider import GeminiProvider
from core.llm_provider import LLMProvider, ProviderConfig
from core.ollama_provider import OllamaProvider
from core.openai_provider import OpenAIProvider
from util.enums import ProviderErrorKind
from util.errors import ProviderConfigurationError

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., LLMProvider]

PROVIDER_FACTORIES: Dict[str, ProviderFactory] = {
    OpenAIProvider.provider_id: OpenAIProvider,
    AnthropicProvider.provider_id: AnthropicProvider,
    GeminiProvider.provider_id: GeminiProvider,
    OllamaProvider.provider_id: OllamaProvider,
}


def available_providers() -> list[str]:
    return list(PROVIDER_FACTORIES)


def provider_config(provider_id: str, cfg: Optional[Settings] = None) -> ProviderConfig:
    s = cfg or app_settings
    timeout = s.LLM_HTTP_TIMEOUT_SECONDS
    if provider_id == OpenAIProvider.provider_id:
        return ProviderConfig(
            provider_id=provider_id,
            base_url=s.OPENAI_BASE_URL,
            default_model=s.OPENAI_DEFAULT_MODEL,
            api_key=s.OPENAI_API_KEY,
            models=tuple(s.OPENAI_MODELS),
            timeout=timeout,
        )
    if provider_id == AnthropicProvider.provider_id:
        return ProviderConfig(
            provider_id=provider_id,
            base_url=s.ANTHROPIC_BASE_URL,
            default_model=s.ANTHROPIC_DEFAULT_MODEL,
            api_key=s.ANTHROPIC_API_KEY,
            models=tuple(s.ANTHROPIC_MODELS),
            timeout=timeout,
            extra_headers={"anthropic-version": s.ANTHROPIC_VERSION},
        )
    if provider_id == GeminiProvider.provider_id:
        return ProviderConfig(
            provider_id=provider_id,
            base_url=s.GEMINI_BASE_URL,
            default_model=s.GEMINI_DEFAULT_MODEL,
            api_key=s.GEMINI_API_KEY,
            models=tuple(s.GEMINI_MODELS),
            timeout=timeout,
        )
    if provider_id == OllamaProvider.provider_id:
        return ProviderConfig(
            provider_id=provider_id,
            base_url=s.OLLAMA_BASE_URL,
            default_model=s.OLLAMA_DEFAULT_MODEL,
            models=tuple(s.OLLAMA_MODELS),
            timeout=timeout,
        )
    raise ProviderConfigurationError(f"Provider {provider_id} not configured", provider_id)


def create_provider(
    provider_id: Optional[str] = None,
    *,
    cfg: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LLMProvider:
    """
    Build the provider registered under `provider_id` (default: the configured
    LLM_PROVIDER). Raises ProviderConfigurationError for unknown ids or
    missing credentials.
    """
    s = cfg or app_settings
    pid = (provider_id or s.LLM_PROVIDER or "").strip().lower()
    factory = PROVIDER_FACTORIES.get(pid)
    if factory is None:
        raise ProviderConfigurationError(f"Unsupported provider: {pid}", pid)
    return factory(provider_config(pid, s), transport=transport)


def models_for(provider_id: str, cfg: Optional[Settings] = None) -> list[str]:
    try:
        return list(provider_config(provider_id, cfg).models)
    except ProviderConfigurationError:
        return []


def provider_or_error(
    factory: Callable[[], LLMProvider] = create_provider,
) -> Union[LLMProvider, ProviderError]:
    """Build a provider, turning configuration failures into a ProviderError value."""
    try:
        return factory()
    except ProviderConfigurationError as e:
        logger.error("llm.provider.unavailable provider=%s err=%s", e.provider_id, e)
        return ProviderError(
            message=str(e),
            provider_id=e.provider_id,
            kind=ProviderErrorKind.CONFIGURATION,
        )
