"""Database engine and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings, settings


def engine_options(cfg: Settings) -> dict[str, Any]:
    """Keyword arguments for create_engine, bounded by the DB_* timeout settings."""
    if cfg.DATABASE_URL.startswith("sqlite"):
        # SQLite has no server; "timeout" bounds the wait on a locked database file.
        return {
            "connect_args": {"check_same_thread": False, "timeout": cfg.DB_CONNECT_TIMEOUT_SEC},
        }
    return {
        "pool_timeout": cfg.DB_POOL_TIMEOUT_SEC,
        "connect_args": {
            "connect_timeout": cfg.DB_CONNECT_TIMEOUT_SEC,
            "options": f"-c statement_timeout={cfg.DB_STATEMENT_TIMEOUT_MS}",
        },
    }


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    **engine_options(settings),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
