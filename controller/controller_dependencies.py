# controller/controller_dependencies.py
from repository.dictionary_repository import DictionaryRepository
from service.chat_service import ChatService
from service.dictionary_service import DictionaryService


def get_chat_service() -> ChatService:
    return ChatService()


def get_dictionary_service() -> DictionaryService:
    _entries = DictionaryRepository()
    _service = DictionaryService(_entries)
    return _service
