# repository/dictionary_repository.py
import uuid
from typing import Optional
from sqlalchemy import Engine, or_
from sqlmodel import Session, col, select
from config.database import get_engine
from model.dictionary import DictionaryEntry
from util.constants import EntryStatus


class DictionaryRepository:
    """
    Flow:
    - Read-only access to `dictionary_entries`.
    - Only published rows are visible to search and test-case generation.
    - Sessions are short-lived; returned rows are detached but fully loaded.
    """

    def __init__(self, engine: Optional[Engine] = None) -> None:
        self._engine = engine

    def _session(self) -> Session:
        return Session(self._engine or get_engine())

    def search(
        self, query: Optional[str] = None, *, limit: int = 10, offset: int = 0
    ) -> list[DictionaryEntry]:
        stmt = select(DictionaryEntry).where(DictionaryEntry.status == EntryStatus.PUBLISHED)
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(
                    col(DictionaryEntry.word_konkani_english_alphabet).ilike(pattern),
                    col(DictionaryEntry.english_meaning).ilike(pattern),
                    col(DictionaryEntry.word_konkani_devanagari).ilike(pattern),
                )
            )
        stmt = stmt.order_by(col(DictionaryEntry.entry_number)).offset(offset).limit(limit)
        with self._session() as session:
            return list(session.exec(stmt).all())

    def get(self, entry_id: str) -> Optional[DictionaryEntry]:
        try:
            key = uuid.UUID(str(entry_id))
        except ValueError:
            return None
        with self._session() as session:
            return session.get(DictionaryEntry, key)

    def fetch_test_cases(self, limit: int = 5) -> list[DictionaryEntry]:
        """Published rows that carry both a spelling and a meaning, by entry number."""
        stmt = (
            select(DictionaryEntry)
            .where(DictionaryEntry.status == EntryStatus.PUBLISHED)
            .where(col(DictionaryEntry.word_konkani_english_alphabet).is_not(None))
            .where(col(DictionaryEntry.english_meaning).is_not(None))
            .where(col(DictionaryEntry.english_meaning) != "")
            .order_by(col(DictionaryEntry.entry_number))
            .limit(limit)
        )
        with self._session() as session:
            return list(session.exec(stmt).all())
