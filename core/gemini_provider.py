# core/gemini_provider.py
import logging
from typing import Any, Dict, Optional, Sequence
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

# Gemini has no "assistant"; model turns are labelled "model".
TO_GEMINI_ROLE: Dict[str, str] = {"user": "user", "assistant": "model"}
FROM_GEMINI_ROLE: Dict[str, str] = {v: k for k, v in TO_GEMINI_ROLE.items()}


def to_gemini_contents(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    """
    Convert chat messages to `contents`. System messages are not a turn kind
    here, so their text is prepended to the first user turn (or becomes the
    first user turn when the conversation has none).
    """
    system_text = "\n\n".join(m.content for m in messages if m.role == "system" and m.content)
    contents = [
        {"role": TO_GEMINI_ROLE[m.role], "parts": [{"text": m.content}]}
        for m in messages
        if m.role != "system"
    ]
    if not system_text:
        return contents

    for node in contents:
        if node["role"] == "user":
            node["parts"][0]["text"] = f"{system_text}\n\n{node['parts'][0]['text']}"
            return contents
    return [{"role": "user", "parts": [{"text": system_text}]}] + contents


def from_gemini_content(node: Dict[str, Any]) -> ChatMessage:
    parts = node.get("parts") or []
    text = "".join(p.get("text") or "" for p in parts if isinstance(p, dict))
    role = FROM_GEMINI_ROLE.get(node.get("role") or "model", "assistant")
    return ChatMessage(role=role, content=text)  # type: ignore[arg-type]


class GeminiProvider:
    provider_id = "gemini"
    provider_name = "Gemini"

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not config.api_key:
            raise ProviderConfigurationError(
                "Gemini API key is required", self.provider_id
            )
        self._config = config
        self._base = config.base_url.rstrip("/")
        self._transport = transport

    def _params(self) -> dict[str, str]:
        return {"key": self._config.api_key or ""}

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
            "contents": to_gemini_contents(messages),
            "generationConfig": {
                "temperature": opts.temperature,
                "maxOutputTokens": opts.max_output_tokens,
            },
        }
        try:
            with timed(logger, "llm.generate", provider=self.provider_id, model=model):
                data = await request_json(
                    "POST",
                    f"{self._base}/models/{model}:generateContent",
                    headers={"Content-Type": "application/json"},
                    payload=payload,
                    params=self._params(),
                    timeout=self._config.timeout,
                    transport=self._transport,
                )
        except httpx.HTTPError as e:
            return failure_from_exception(self.provider_id, e)

        try:
            node = data["candidates"][0]["content"]
        except (KeyError, IndexError, TypeError):
            return malformed_response(self.provider_id, "candidates[0].content")
        if not isinstance(node, dict) or not node.get("parts"):
            return malformed_response(self.provider_id, "candidates[0].content.parts")

        reply = from_gemini_content(node)
        meta = data.get("usageMetadata") or {}
        return CandidateAnswer(
            text=reply.content,
            provider_id=self.provider_id,
            model_id=data.get("modelVersion") or model,
            usage=usage_from_counts(
                meta.get("promptTokenCount"),
                meta.get("candidatesTokenCount"),
                meta.get("totalTokenCount"),
            ),
        )

    async def validate_connection(self) -> ConnectionCheck:
        try:
            data = await request_json(
                "GET",
                f"{self._base}/models",
                params=self._params(),
                timeout=self._config.timeout,
                transport=self._transport,
            )
        except httpx.HTTPError as e:
            return connection_failure(self.provider_id, e)
        models = data.get("models") or []
        return ConnectionCheck(
            ok=True, provider_id=self.provider_id, detail={"modelsCount": len(models)}
        )
