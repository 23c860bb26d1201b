# core/ollama_provider.py
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
from util.timing import timed

logger = logging.getLogger(__name__)


class OllamaProvider:
    """Local Ollama server; no credential, non-streaming /api/chat."""

    provider_id = "ollama"
    provider_name = "Ollama"

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._base = config.base_url.rstrip("/")
        self._transport = transport

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
            "stream": False,
            "options": {
                "temperature": opts.temperature,
                "num_predict": opts.max_output_tokens,
            },
        }
        try:
            with timed(logger, "llm.generate", provider=self.provider_id, model=model):
                data = await request_json(
                    "POST",
                    f"{self._base}/api/chat",
                    payload=payload,
                    timeout=self._config.timeout,
                    transport=self._transport,
                )
        except httpx.HTTPError as e:
            return failure_from_exception(self.provider_id, e)

        message = data.get("message")
        if not isinstance(message, dict) or "content" not in message:
            return malformed_response(self.provider_id, "message.content")

        return CandidateAnswer(
            text=message.get("content") or "",
            provider_id=self.provider_id,
            model_id=data.get("model") or model,
            usage=usage_from_counts(data.get("prompt_eval_count"), data.get("eval_count")),
        )

    async def validate_connection(self) -> ConnectionCheck:
        try:
            data = await request_json(
                "GET",
                f"{self._base}/api/tags",
                timeout=self._config.timeout,
                transport=self._transport,
            )
        except httpx.HTTPError as e:
            return connection_failure(self.provider_id, e)
        models = data.get("models") or []
        return ConnectionCheck(
            ok=True, provider_id=self.provider_id, detail={"modelsCount": len(models)}
        )
