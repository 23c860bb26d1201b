# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ProviderErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    VENDOR = "vendor"
    RESPONSE = "response"


class PassPolicy(str, Enum):
    # meaning: is_accurate only. word_or_meaning: headword found OR is_accurate.
    MEANING = "meaning"
    WORD_OR_MEANING = "word_or_meaning"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    MESSAGE_REQUIRED = ErrorInfo("Message is required", status.HTTP_400_BAD_REQUEST)
    LLM_DISABLED = ErrorInfo(
        "LLM functionality is disabled", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    PROVIDER_UNAVAILABLE = ErrorInfo(
        "LLM provider unavailable", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    GENERATION_FAILED = ErrorInfo(
        "Failed to generate response", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    ENTRY_NOT_FOUND = ErrorInfo("Entry not found", status.HTTP_404_NOT_FOUND)
    DICTIONARY_SEARCH_FAILED = ErrorInfo(
        "Failed to search dictionary", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    DICTIONARY_FETCH_FAILED = ErrorInfo(
        "Failed to fetch dictionary entry", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    INTERNAL_ERROR = ErrorInfo(
        "Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
