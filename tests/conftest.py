"""
Shared fixtures for the Konkani dictionary test suite.

Environment variables are set before any project import so the settings
object loads without a .env file.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost:3000")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test")
os.environ.setdefault("GEMINI_API_KEY", "gm-test")

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from config.database import create_tables
from config.settings import settings
from core.entities import (
    CandidateAnswer,
    ChatMessage,
    ConnectionCheck,
    GenerationOptions,
    ProviderResult,
    TokenUsage,
)
from model.dictionary import DictionaryEntry
from repository.dictionary_repository import DictionaryRepository
from util.constants import EntryStatus


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line("markers", "integration: multi-component tests")


@dataclass
class FakeProvider:
    """Provider double returning queued results and recording every call."""

    results: list = field(default_factory=list)
    provider_id: str = "fake"
    provider_name: str = "Fake"
    calls: list = field(default_factory=list)
    check: Optional[ConnectionCheck] = None

    async def generate_response(
        self,
        messages: Sequence[ChatMessage],
        options: Optional[GenerationOptions] = None,
    ) -> ProviderResult:
        self.calls.append((list(messages), options))
        if self.results:
            return self.results.pop(0)
        return CandidateAnswer(text="", provider_id=self.provider_id, model_id="fake-1")

    async def validate_connection(self) -> ConnectionCheck:
        return self.check or ConnectionCheck(
            ok=True, provider_id=self.provider_id, detail={"modelsCount": 1}
        )

    def list_models(self) -> list[str]:
        return ["fake-1"]


def answer(text: str, provider_id: str = "fake") -> CandidateAnswer:
    return CandidateAnswer(
        text=text,
        provider_id=provider_id,
        model_id="fake-1",
        usage=TokenUsage(prompt_tokens=3, completion_tokens=5, total_tokens=8),
    )


SAMPLE_ENTRIES = [
    dict(
        entry_number=1,
        word_konkani_devanagari="घर",
        word_konkani_english_alphabet="ghar",
        english_meaning="house",
        context_usage_sentence="Hem mhojem ghar.",
        part_of_speech="noun",
    ),
    dict(
        entry_number=2,
        word_konkani_devanagari="नमस्कार",
        word_konkani_english_alphabet="namaskara",
        english_meaning="hello, greeting, salutation",
        part_of_speech="interjection",
    ),
    dict(
        entry_number=3,
        word_konkani_devanagari="उदक",
        word_konkani_english_alphabet="udok",
        english_meaning="water",
        part_of_speech="noun",
    ),
    dict(
        entry_number=4,
        word_konkani_english_alphabet="mhaka",
        english_meaning="to me, for me",
        status=EntryStatus.UNDER_REVIEW,
    ),
    dict(
        entry_number=5,
        word_konkani_devanagari="धन्यवाद",
        english_meaning="thank you, thanks, gratitude",
    ),
]


@pytest.fixture
def cfg():
    """A private copy of the settings that tests may mutate."""
    return settings.model_copy(deep=True)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def seeded_engine(engine):
    with Session(engine) as session:
        for row in SAMPLE_ENTRIES:
            session.add(DictionaryEntry(**row))
        session.commit()
    return engine


@pytest.fixture
def repository(seeded_engine) -> DictionaryRepository:
    return DictionaryRepository(seeded_engine)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()
