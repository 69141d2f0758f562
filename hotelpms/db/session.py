"""Database engine and session dependency."""
from typing import Generator
import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from hotelpms.core.config import settings


def build_engine(database_url: str) -> Engine:
    """Create the engine for a database URL."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True, echo=False)

    db_path = database_url.replace("sqlite:///", "")
    in_memory = db_path in ("", ":memory:")
    if not in_memory:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)

    engine_kwargs = {"connect_args": {"check_same_thread": False}, "echo": False}
    if in_memory:
        engine_kwargs["poolclass"] = StaticPool
    sqlite_engine = create_engine(database_url, **engine_kwargs)

    # SQLite leaves foreign keys unchecked unless asked per connection
    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
