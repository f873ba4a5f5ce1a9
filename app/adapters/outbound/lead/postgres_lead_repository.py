"""Postgres-backed lead repository adapter."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.dtos.lead import MERGEABLE_LEAD_FIELDS, PharmacyLead
from app.application.ports.lead_repository import LeadRepository
from app.domain.value_objects.phone_number import mask_phone
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger

from .models import LeadModel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostgresLeadRepository(LeadRepository):
    """Postgres implementation of lead repository."""

    def _model_to_dto(self, model: LeadModel) -> PharmacyLead:
        """
        Convert LeadModel to PharmacyLead DTO.

        Args:
            model: SQLAlchemy model instance

        Returns:
            Lead DTO
        """
        return PharmacyLead(
            phone_number=model.phone_number,
            **{name: getattr(model, name) for name in MERGEABLE_LEAD_FIELDS},
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _dto_to_model(
        self, lead: PharmacyLead, model: Optional[LeadModel] = None
    ) -> LeadModel:
        """
        Convert PharmacyLead DTO to LeadModel (for upsert).

        Args:
            lead: Lead DTO
            model: Existing model instance (for update) or None (for insert)

        Returns:
            LeadModel instance
        """
        if model is None:
            model = LeadModel(phone_number=lead.phone_number, created_at=lead.created_at)

        for name in MERGEABLE_LEAD_FIELDS:
            setattr(model, name, getattr(lead, name))
        model.status = "complete" if lead.has_required_info() else "partial"
        model.updated_at = lead.updated_at
        return model

    async def save(self, lead: PharmacyLead) -> None:
        """
        Save a lead (upsert by phone number).

        Args:
            lead: Lead DTO to save
        """
        db: Session = get_db_session()
        try:
            model = (
                db.query(LeadModel).filter(LeadModel.phone_number == lead.phone_number).first()
            )

            if model:
                self._dto_to_model(lead, model)
            else:
                db.add(self._dto_to_model(lead))

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Database error while saving lead {mask_phone(lead.phone_number)}: {str(e)}"
            )
            raise
        finally:
            db.close()

    async def get(self, phone_number: str) -> Optional[PharmacyLead]:
        """
        Get a lead by phone number.

        Args:
            phone_number: Normalized phone number

        Returns:
            Lead DTO, or None if not found
        """
        db: Session = get_db_session()
        try:
            model = db.query(LeadModel).filter(LeadModel.phone_number == phone_number).first()
            if model is None:
                return None
            return self._model_to_dto(model)
        except SQLAlchemyError as e:
            logger.error(
                f"Database error while getting lead {mask_phone(phone_number)}: {str(e)}"
            )
            raise
        finally:
            db.close()

    async def list(self) -> list[PharmacyLead]:
        """
        List all leads.

        Returns:
            List of all leads
        """
        db: Session = get_db_session()
        try:
            models = db.query(LeadModel).order_by(LeadModel.created_at.asc()).all()
            return [self._model_to_dto(model) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing leads: {str(e)}")
            return []
        finally:
            db.close()
