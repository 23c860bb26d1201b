# util/errors.py
from typing import Any
from fastapi import HTTPException, status

from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self,
        message: str,
        http_status: int = status.HTTP_400_BAD_REQUEST,
        **extra: Any,
    ) -> None:
        detail: str | dict = {"error": message, **extra} if extra else message
        super().__init__(status_code=http_status, detail=detail)

    @classmethod
    def of(cls, error: ErrorMessage, **extra: Any) -> "AppError":
        return cls(error.value.message, error.value.http_status, **extra)


class ProviderConfigurationError(Exception):
    """
    Raised while constructing a provider whose configuration is unusable
    (unknown id, missing credential). Never raised from a provider call.
    """

    def __init__(self, message: str, provider_id: str) -> None:
        super().__init__(message)
        self.provider_id = provider_id
