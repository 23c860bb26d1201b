# service/dictionary_service.py
import logging
from typing import Callable, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from config.settings import Settings, settings as app_settings
from core.entities import ChatMessage, GenerationOptions, ProviderError
from core.llm_provider import LLMProvider
from core.provider_registry import available_providers, create_provider, provider_or_error
from model.api import DictionaryLLMStatusResponse, DictionarySearchResponse
from model.dictionary import DictionaryEntry, DictionaryEntryRead
from repository.dictionary_repository import DictionaryRepository
from util.enums import ErrorMessage
from util.errors import AppError
from util.functions import first_line

logger = logging.getLogger(__name__)


class DictionaryService:
    def __init__(
        self,
        entries: DictionaryRepository,
        provider_factory: Callable[[], LLMProvider] = create_provider,
        cfg: Settings = app_settings,
    ) -> None:
        self._entries = entries
        self._factory = provider_factory
        self._cfg = cfg

    async def search(
        self,
        query: Optional[str],
        *,
        limit: int,
        offset: int,
        use_llm: bool = False,
    ) -> DictionarySearchResponse:
        """
        Database rows always; LLM enhancement only when enabled, requested and a
        query is present. Enhancement failures fall back to the plain rows.
        """
        try:
            rows = await run_in_threadpool(
                self._entries.search, query, limit=limit, offset=offset
            )
        except SQLAlchemyError as e:
            logger.error("dictionary.search.error err=%s", type(e).__name__)
            raise AppError.of(ErrorMessage.DICTIONARY_SEARCH_FAILED)

        response = DictionarySearchResponse(
            entries=[DictionaryEntryRead.model_validate(r, from_attributes=True) for r in rows],
            count=len(rows),
        )
        logger.info("dictionary.search q=%r rows=%d", query, len(rows))

        if not (self._cfg.ENABLE_LLM and use_llm and query):
            return response

        text = await self._enhance(query, rows)
        if text is None:
            return response

        response.llm_used = True
        response.llm_summary = first_line(text)
        response.llm_suggestions = text
        return response

    async def _enhance(self, query: str, rows: Sequence[DictionaryEntry]) -> Optional[str]:
        provider = provider_or_error(self._factory)
        if isinstance(provider, ProviderError):
            return None

        entries_text = "\n".join(
            f"{r.word_konkani_english_alphabet}: {r.english_meaning}" for r in rows
        )
        messages = [
            ChatMessage(role="system", content=self._cfg.DICTIONARY_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=self._cfg.DICTIONARY_USER_PROMPT.format(
                    query=query, entries=entries_text
                ),
            ),
        ]
        result = await provider.generate_response(
            messages,
            GenerationOptions(
                temperature=self._cfg.DICTIONARY_LLM_TEMPERATURE,
                max_output_tokens=self._cfg.DICTIONARY_LLM_MAX_TOKENS,
            ),
        )
        if isinstance(result, ProviderError):
            logger.warning(
                "dictionary.enhance.fallback provider=%s err=%s",
                result.provider_id,
                result.message,
            )
            return None
        return result.text

    async def get(self, entry_id: str) -> DictionaryEntryRead:
        try:
            row = await run_in_threadpool(self._entries.get, entry_id)
        except SQLAlchemyError as e:
            logger.error("dictionary.get.error id=%s err=%s", entry_id, type(e).__name__)
            raise AppError.of(ErrorMessage.DICTIONARY_FETCH_FAILED)
        if row is None:
            raise AppError.of(ErrorMessage.ENTRY_NOT_FOUND)
        return DictionaryEntryRead.model_validate(row, from_attributes=True)

    def llm_status(self) -> DictionaryLLMStatusResponse:
        enabled = self._cfg.ENABLE_LLM
        return DictionaryLLMStatusResponse(
            llm_enabled=enabled,
            current_provider=self._cfg.LLM_PROVIDER if enabled else None,
            available_providers=available_providers() if enabled else [],
        )
