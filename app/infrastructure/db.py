"""SQLAlchemy engine and session factory for the SQL-backed repositories."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.infrastructure.config.settings import settings

# Built on first use: the default in_memory toggles never touch the database
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _get_engine() -> Engine:
    """
    Get or create the engine shared by the conversation and lead repositories.

    Raises:
        ValueError: If DATABASE_URL is empty while CONVERSATION_REPOSITORY or
            LEAD_REPOSITORY is set to postgres
    """
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError(
                "DATABASE_URL is required when CONVERSATION_REPOSITORY or "
                "LEAD_REPOSITORY is postgres"
            )
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            echo=settings.debug_mode,
        )
    return _engine


def get_db_session() -> Session:
    """
    Open a session; callers commit or roll back and close it.

    Returns:
        SQLAlchemy session bound to the shared engine
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _session_factory()


def reset_db_engine() -> None:
    """Dispose the shared engine so the next session reads DATABASE_URL again."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
