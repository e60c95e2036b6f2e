# voicetasks/storage/db.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from core.settings import DB_PATH

# Ensure SQLModel metadata is populated
import models.task  # noqa: F401
import models.reminder  # noqa: F401
import models.focus_session  # noqa: F401
import models.daily_stat  # noqa: F401


SessionFactory = Callable[[], Session]

_engine: Optional[Engine] = None


def create_db_engine(db_path: str | Path | None = None) -> Engine:
    """SQLite engine for ``db_path``; ``":memory:"`` gives a private in-memory DB."""
    if db_path == ":memory:":
        return create_engine("sqlite:///:memory:", echo=False)
    target = Path(db_path or DB_PATH)
    target.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{target.as_posix()}", echo=False)


def init_db(engine: Optional[Engine] = None) -> Engine:
    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def make_session_factory(engine: Engine) -> SessionFactory:
    def factory() -> Session:
        return Session(engine)

    return factory


def get_session() -> Session:
    return Session(get_engine())


__all__ = [
    "SessionFactory",
    "create_db_engine",
    "get_engine",
    "get_session",
    "init_db",
    "make_session_factory",
]
