# core/anthropic_provider.py
import logging
from typing import Any, Dict, Optional, Sequence
import httpx
from fastapi import status
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

DEFAULT_SYSTEM = "You are a helpful AI assistant."


def split_system(messages: Sequence[ChatMessage]) -> tuple[str, list[dict[str, str]]]:
    """
    Messages API takes the system prompt as a top-level field; the turn list
    may only hold user/assistant. Several system messages are joined in order.
    """
    system_parts = [m.content for m in messages if m.role == "system" and m.content]
    turns = [{"role": m.role, "content": m.content} for m in messages if m.role != "system"]
    return ("\n\n".join(system_parts) or DEFAULT_SYSTEM), turns


def _extract_text(data: Dict[str, Any]) -> Optional[str]:
    content = data.get("content")
    if not isinstance(content, list) or not content:
        return None
    texts = [
        node.get("text") or ""
        for node in content
        if isinstance(node, dict) and node.get("type") == "text"
    ]
    return "".join(texts) if texts else None


class AnthropicProvider:
    provider_id = "anthropic"
    provider_name = "Anthropic"

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not config.api_key:
            raise ProviderConfigurationError(
                "Anthropic API key is required", self.provider_id
            )
        self._config = config
        self._url = f"{config.base_url.rstrip('/')}/messages"
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._config.api_key or "",
            "anthropic-version": self._config.extra_headers.get(
                "anthropic-version", "2023-06-01"
            ),
            "content-type": "application/json",
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
        system, turns = split_system(messages)
        payload = {
            "model": model,
            "max_tokens": opts.max_output_tokens,
            "temperature": opts.temperature,
            "system": system,
            "messages": turns,
        }
        try:
            with timed(logger, "llm.generate", provider=self.provider_id, model=model):
                data = await request_json(
                    "POST",
                    self._url,
                    headers=self._headers(),
                    payload=payload,
                    timeout=self._config.timeout,
                    transport=self._transport,
                )
        except httpx.HTTPError as e:
            return failure_from_exception(self.provider_id, e)

        text = _extract_text(data)
        if text is None:
            return malformed_response(self.provider_id, "content[].text")

        usage = data.get("usage") or {}
        return CandidateAnswer(
            text=text,
            provider_id=self.provider_id,
            model_id=data.get("model") or model,
            usage=usage_from_counts(usage.get("input_tokens"), usage.get("output_tokens")),
        )

    async def validate_connection(self) -> ConnectionCheck:
        # No models endpoint is assumed; a one-token ping is the cheapest probe.
        payload = {
            "model": self._config.default_model,
            "max_tokens": 1,
            "messages": [{"role": "user", "content": "Ping"}],
        }
        try:
            data = await request_json(
                "POST",
                self._url,
                headers=self._headers(),
                payload=payload,
                timeout=self._config.timeout,
                transport=self._transport,
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (
                status.HTTP_401_UNAUTHORIZED,
                status.HTTP_403_FORBIDDEN,
            ):
                logger.warning("api.key.invalid status=%d", e.response.status_code)
            return connection_failure(self.provider_id, e)
        except httpx.HTTPError as e:
            return connection_failure(self.provider_id, e)

        logger.info("api.key.validated model=%s", self._config.default_model)
        return ConnectionCheck(
            ok=True,
            provider_id=self.provider_id,
            detail={"model": data.get("model") or self._config.default_model},
        )
