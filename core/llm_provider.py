# core/llm_provider.py
"""
Uniform contract over the vendor chat-completion APIs.

Every vendor is a plain class exposing the same capability set
(`generate_response`, `validate_connection`, `list_models`, `provider_name`)
and is looked up by id in `core.provider_registry`. The helpers below are the
shared HTTP plumbing: one request per call, bounded timeout, and failures
turned into `ProviderError` values rather than exceptions.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable
import httpx
from core.entities import (
    ChatMessage,
    ConnectionCheck,
    GenerationOptions,
    ProviderError,
    ProviderResult,
    TokenUsage,
)
from util.enums import ProviderErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    provider_id: str
    base_url: str
    default_model: str
    api_key: Optional[str] = None
    models: Sequence[str] = field(default_factory=tuple)
    timeout: float = 30.0
    extra_headers: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class LLMProvider(Protocol):
    provider_id: str
    provider_name: str

    async def generate_response(
        self,
        messages: Sequence[ChatMessage],
        options: Optional[GenerationOptions] = None,
    ) -> ProviderResult: ...

    async def validate_connection(self) -> ConnectionCheck: ...

    def list_models(self) -> list[str]: ...


async def request_json(
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    payload: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, str]] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Make a JSON request to `url`. Raises for non-2xx. Returns parsed JSON dict or {} on parse failure.
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        r = await client.request(method, url, headers=headers, json=payload, params=params)
        r.raise_for_status()
        try:
            data = r.json()
        except ValueError:
            return {}
    return data if isinstance(data, dict) else {}


def vendor_error_message(response: httpx.Response) -> str:
    """
    All supported vendors wrap failures as {"error": {"message": ...}}; Ollama
    uses {"error": "..."}. Fall back to the status line.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


def failure_from_exception(provider_id: str, exc: httpx.HTTPError) -> ProviderError:
    if isinstance(exc, httpx.TimeoutException):
        logger.warning("llm.timeout provider=%s err=%s", provider_id, type(exc).__name__)
        return ProviderError(
            message="Request to provider timed out",
            provider_id=provider_id,
            kind=ProviderErrorKind.TIMEOUT,
        )
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        logger.error("llm.bad_status provider=%s status=%d", provider_id, code)
        return ProviderError(
            message=vendor_error_message(exc.response),
            provider_id=provider_id,
            kind=ProviderErrorKind.VENDOR,
            status_code=code,
        )
    logger.error("llm.request_error provider=%s err=%s", provider_id, type(exc).__name__)
    return ProviderError(
        message=str(exc) or f"Transport failure ({type(exc).__name__})",
        provider_id=provider_id,
        kind=ProviderErrorKind.TRANSPORT,
    )


def malformed_response(provider_id: str, what: str) -> ProviderError:
    logger.error("llm.malformed provider=%s missing=%s", provider_id, what)
    return ProviderError(
        message=f"Malformed response from provider: missing {what}",
        provider_id=provider_id,
        kind=ProviderErrorKind.RESPONSE,
    )


def usage_from_counts(
    prompt: Any = None, completion: Any = None, total: Any = None
) -> TokenUsage:
    """Zero-fill missing counters; derive total when the vendor omits it."""

    def _int(v: Any) -> int:
        try:
            return int(v) if v is not None else 0
        except (TypeError, ValueError):
            return 0

    p, c = _int(prompt), _int(completion)
    t = _int(total) if total is not None else p + c
    return TokenUsage(prompt_tokens=p, completion_tokens=c, total_tokens=t)


def resolve_options(options: Optional[GenerationOptions]) -> GenerationOptions:
    return options if options is not None else GenerationOptions()


def connection_failure(provider_id: str, exc: httpx.HTTPError) -> ConnectionCheck:
    err = failure_from_exception(provider_id, exc)
    return ConnectionCheck(ok=False, provider_id=provider_id, error=err.message)
