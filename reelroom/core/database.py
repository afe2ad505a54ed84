from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass, Session, sessionmaker

from reelroom.core.config import get_settings


def _engine_options(url: URL) -> dict[str, Any]:
    if url.drivername.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 1800,
        "connect_args": {"connect_timeout": 5},
    }


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite ignores ``ON DELETE`` actions unless each connection opts in."""
    if not target.url.drivername.startswith("sqlite"):
        return

    @event.listens_for(target, "connect")
    def _set_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    built = create_engine(url, **_engine_options(url))
    enable_sqlite_foreign_keys(built)
    return built


engine = build_engine(get_settings().database_url)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Generator[Session]:
    session = SessionLocal()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ping_database() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


class Base(MappedAsDataclass, DeclarativeBase):
    pass
