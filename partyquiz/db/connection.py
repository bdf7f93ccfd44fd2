"""
SQLModel 엔진·세션 (PostgreSQL, 테스트는 sqlite).
"""

from contextlib import contextmanager
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from partyquiz.core.config import settings
from partyquiz.db.models import Quiz  # noqa: F401 - 테이블 등록

# postgresql:// → postgresql+psycopg:// (psycopg3 드라이버)
_db_url = settings.DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)
_connect_args = {"check_same_thread": False} if _db_url.startswith("sqlite") else {}
engine = create_engine(_db_url, echo=False, connect_args=_connect_args)

_tables_ready = False


def init_db() -> None:
    global _tables_ready
    if not _tables_ready:
        SQLModel.metadata.create_all(engine)
        _tables_ready = True


@contextmanager
def get_session() -> Generator[Session, None, None]:
    init_db()
    with Session(engine, expire_on_commit=False) as session:
        yield session
