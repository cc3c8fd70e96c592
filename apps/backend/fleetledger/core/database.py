from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, declared_attr, sessionmaker

from .config import settings


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        return cls.__name__.lower()


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # SQLite ships with foreign keys off
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def make_engine(url: str, echo: bool = False) -> Engine:
    """Engine for ``url``; SQLite gets cross-thread access and FK enforcement."""
    if is_sqlite(url):
        eng = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
        event.listen(eng, "connect", _enable_sqlite_pragmas)
        return eng
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
