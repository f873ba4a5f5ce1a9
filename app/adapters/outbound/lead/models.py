"""SQLAlchemy ORM models for pharmacy leads."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

# Reuse the conversation models' declarative base so one metadata covers every table
from app.adapters.outbound.conversation.models import Base


class LeadModel(Base):
    """SQLAlchemy model for pharmacy_leads table."""

    __tablename__ = "pharmacy_leads"

    phone_number = Column(String, primary_key=True, index=True)
    pharmacy_name = Column(String, nullable=True)
    contact_person = Column(String, nullable=True)
    email = Column(String, nullable=True)
    estimated_rx_volume = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    status = Column(String, nullable=True)  # "partial" or "complete"
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
