# controller/dictionary_controller.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from model.api import DictionaryLLMStatusResponse, DictionarySearchResponse
from model.dictionary import DictionaryEntryRead
from service.dictionary_service import DictionaryService
from util.constants import InternalURIs
from controller.controller_dependencies import get_dictionary_service

dictionary_router = APIRouter()


@dictionary_router.get(InternalURIs.DICTIONARY, response_model=DictionarySearchResponse)
async def search_dictionary(
    query: Optional[str] = None,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    use_llm: bool = False,
    service: DictionaryService = Depends(get_dictionary_service),
) -> DictionarySearchResponse:
    return await service.search(query, limit=limit, offset=offset, use_llm=use_llm)


@dictionary_router.get(
    InternalURIs.DICTIONARY_LLM_STATUS, response_model=DictionaryLLMStatusResponse
)
async def dictionary_llm_status(
    service: DictionaryService = Depends(get_dictionary_service),
) -> DictionaryLLMStatusResponse:
    return service.llm_status()


@dictionary_router.get(InternalURIs.DICTIONARY_ENTRY, response_model=DictionaryEntryRead)
async def get_entry(
    entry_id: str,
    service: DictionaryService = Depends(get_dictionary_service),
) -> DictionaryEntryRead:
    return await service.get(entry_id)
