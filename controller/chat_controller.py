# controller/chat_controller.py
import logging
from fastapi import APIRouter, Depends, status
from model.api import (
    ChatRequest,
    ChatResponse,
    LLMStatusResponse,
    ProviderHealthResponse,
    ProvidersResponse,
    Usage,
)
from core.entities import ProviderError
from service.chat_service import ChatService
from util.constants import InternalURIs
from util.enums import ErrorMessage, ProviderErrorKind
from util.errors import AppError
from controller.controller_dependencies import get_chat_service

logger = logging.getLogger(__name__)

chat_router = APIRouter()


@chat_router.post(
    InternalURIs.CHAT,
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
)
async def chat(
    payload: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    if not service.enabled:
        raise AppError.of(ErrorMessage.LLM_DISABLED, enableLLM=False)
    if not payload.message.strip():
        raise AppError.of(ErrorMessage.MESSAGE_REQUIRED)

    result = await service.chat(payload)
    if isinstance(result, ProviderError):
        if result.kind == ProviderErrorKind.CONFIGURATION:
            raise AppError.of(
                ErrorMessage.PROVIDER_UNAVAILABLE,
                details=result.message,
                provider=result.provider_id,
                enableLLM=True,
            )
        raise AppError.of(
            ErrorMessage.GENERATION_FAILED,
            details=result.message,
            provider=result.provider_id,
        )

    return ChatResponse(
        message=result.text,
        provider=result.provider_id,
        model=result.model_id,
        usage=Usage(
            prompt_tokens=result.usage.prompt_tokens,
            completion_tokens=result.usage.completion_tokens,
            total_tokens=result.usage.total_tokens,
        ),
    )


@chat_router.get(InternalURIs.CHAT_STATUS, response_model=LLMStatusResponse)
async def chat_status(
    service: ChatService = Depends(get_chat_service),
) -> LLMStatusResponse:
    return service.status()


@chat_router.get(InternalURIs.CHAT_PROVIDERS, response_model=ProvidersResponse)
async def chat_providers(
    service: ChatService = Depends(get_chat_service),
) -> ProvidersResponse:
    return service.providers()


@chat_router.get(InternalURIs.CHAT_HEALTH, response_model=ProviderHealthResponse)
async def chat_health(
    service: ChatService = Depends(get_chat_service),
) -> ProviderHealthResponse:
    return await service.health()
