# config/database.py
from typing import Optional
from sqlalchemy import Engine
from sqlmodel import SQLModel, create_engine
from config.settings import settings

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        connect_args = {}
        if settings.DATABASE_URL.startswith("sqlite"):
            # Handlers run repository calls in the threadpool
            connect_args["check_same_thread"] = False
        _engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
    return _engine


def create_tables(engine: Optional[Engine] = None) -> None:
    # Import registers the table on SQLModel.metadata.
    from model.dictionary import DictionaryEntry  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())


def close_engine() -> None:
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
