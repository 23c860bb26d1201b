# model/api.py
from typing import Literal
from pydantic import BaseModel, Field
from model.dictionary import DictionaryEntryRead


class ChatMessageIn(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatOptions(BaseModel):
    model: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    maxTokens: int | None = Field(default=None, ge=1)
    systemPrompt: str | None = None


class ChatRequest(BaseModel):
    message: str = ""
    conversation: list[ChatMessageIn] = []
    options: ChatOptions = ChatOptions()


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(BaseModel):
    message: str
    provider: str
    model: str | None = None
    usage: Usage


class LLMStatusResponse(BaseModel):
    enableLLM: bool
    currentProvider: str | None = None


class ProviderInfo(BaseModel):
    name: str
    current: bool
    models: list[str]


class ProvidersResponse(BaseModel):
    providers: list[ProviderInfo]


class ProviderHealthResponse(BaseModel):
    provider: str
    healthy: bool
    details: dict


class DictionarySearchResponse(BaseModel):
    entries: list[DictionaryEntryRead]
    count: int
    llm_used: bool = False
    llm_summary: str | None = None
    llm_suggestions: str | None = None


class DictionaryLLMStatusResponse(BaseModel):
    llm_enabled: bool
    current_provider: str | None = None
    available_providers: list[str] = []
