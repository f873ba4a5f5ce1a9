"""Unit tests for database session setup."""

import pytest
from sqlalchemy import text

from app.infrastructure import db
from app.infrastructure.config.settings import settings


@pytest.fixture(autouse=True)
def fresh_engine():
    """Reset the shared engine around each test."""
    db.reset_db_engine()
    yield
    db.reset_db_engine()


def test_get_db_session_requires_database_url(monkeypatch):
    """Test that a missing DATABASE_URL names the repository toggles."""
    monkeypatch.setattr(settings, "database_url", "")

    with pytest.raises(ValueError, match="LEAD_REPOSITORY"):
        db.get_db_session()


def test_get_db_session_reuses_engine(monkeypatch):
    """Test sessions share one engine built from DATABASE_URL."""
    monkeypatch.setattr(settings, "database_url", "sqlite:///:memory:")

    first = db.get_db_session()
    second = db.get_db_session()
    try:
        assert first.get_bind() is second.get_bind()
        assert first.execute(text("SELECT 1")).scalar() == 1
    finally:
        first.close()
        second.close()
