# model/dictionary.py
import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from util.constants import EntryStatus


class DictionaryEntryBase(SQLModel):
    entry_number: int | None = Field(default=None, unique=True, index=True)
    word_konkani_devanagari: str | None = None
    word_konkani_english_alphabet: str | None = Field(default=None, index=True)
    english_meaning: str
    context_usage_sentence: str | None = None
    part_of_speech: str | None = Field(default=None, max_length=50)
    dialect_region: str | None = Field(default=None, max_length=100)
    status: str = Field(default=EntryStatus.PUBLISHED, max_length=20, index=True)


class DictionaryEntry(DictionaryEntryBase, table=True):
    __tablename__ = "dictionary_entries"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    created_at: datetime | None = Field(
        default=None,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
        nullable=False,
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
        nullable=False,
    )

    def __repr__(self):
        return f"< DictionaryEntry : {self.entry_number} {self.word_konkani_english_alphabet} >"


class DictionaryEntryRead(DictionaryEntryBase):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None
