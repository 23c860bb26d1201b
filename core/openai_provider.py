# core/openai_provider.py
import logging
from typing import Optional, Sequence
import httpx
from core.entities import (
    CandidateAnswer,
    ChatMessage,
    ConnectionCheck,
    GenerationOptions,
    ProviderResult,
)
from core.llm_provider import (
    ProviderConfig,
    connection_failure,
    failure_from_exception,
    malformed_response,
    request_json,
    resolve_options,
    usage_from_counts,
)
from util.errors import ProviderConfigurationError
from util.timing import timed

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Chat Completions API. Roles and system messages pass through unchanged."""

    provider_id = "openai"
    provider_name = "OpenAI"

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not config.api_key:
            raise ProviderConfigurationError(
                "OpenAI API key is required", self.provider_id
            )
        self._config = config
        self._base = config.base_url.rstrip("/")
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

    def list_models(self) -> list[str]:
        return list(self._config.models)

    async def generate_response(
        self,
        messages: Sequence[ChatMessage],
        options: Optional[GenerationOptions] = None,
    ) -> ProviderResult:
        opts = resolve_options(options)
        model = opts.model or self._config.default_model
        payload = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": opts.temperature,
            "max_tokens": opts.max_output_tokens,
            "stream": False,
        }
        try:
            with timed(logger, "llm.generate", provider=self.provider_id, model=model):
                data = await request_json(
                    "POST",
                    f"{self._base}/chat/completions",
                    headers=self._headers(),
                    payload=payload,
                    timeout=self._config.timeout,
                    transport=self._transport,
                )
        except httpx.HTTPError as e:
            return failure_from_exception(self.provider_id, e)

        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            return malformed_response(self.provider_id, "choices[0].message.content")

        usage = data.get("usage") or {}
        return CandidateAnswer(
            text=text,
            provider_id=self.provider_id,
            model_id=data.get("model") or model,
            usage=usage_from_counts(
                usage.get("prompt_tokens"),
                usage.get("completion_tokens"),
                usage.get("total_tokens"),
            ),
        )

    async def validate_connection(self) -> ConnectionCheck:
        try:
            data = await request_json(
                "GET",
                f"{self._base}/models",
                headers=self._headers(),
                timeout=self._config.timeout,
                transport=self._transport,
            )
        except httpx.HTTPError as e:
            return connection_failure(self.provider_id, e)
        models = data.get("data") or []
        logger.info("llm.connection.ok provider=%s models=%d", self.provider_id, len(models))
        return ConnectionCheck(
            ok=True, provider_id=self.provider_id, detail={"modelsCount": len(models)}
        )
