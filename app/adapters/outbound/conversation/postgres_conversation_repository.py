"""Postgres-backed conversation repository adapter."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.ports.conversation_repository import ConversationRepository
from app.domain.entities.conversation import (
    Conversation,
    ConversationState,
    ConversationStatus,
    Message,
    MessageRole,
)
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger

from .models import ConversationModel, MessageModel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostgresConversationRepository(ConversationRepository):
    """Postgres implementation of conversation repository."""

    def _message_to_entity(self, model: MessageModel) -> Message:
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            role=MessageRole(model.role),
            content=model.content,
            metadata=model.message_metadata,
            timestamp=_as_utc(model.timestamp),
        )

    def _model_to_entity(
        self, model: ConversationModel, messages: Optional[list[MessageModel]] = None
    ) -> Conversation:
        """
        Convert ConversationModel to Conversation entity.

        Args:
            model: SQLAlchemy model instance
            messages: Transcript rows in chronological order, if loaded

        Returns:
            Conversation entity
        """
        return Conversation(
            id=model.id,
            phone_number=model.phone_number,
            status=ConversationStatus(model.status),
            state=ConversationState(model.state),
            is_returning_pharmacy=bool(model.is_returning_pharmacy),
            pharmacy_id=model.pharmacy_id,
            pharmacy_data=model.pharmacy_data,
            messages=[self._message_to_entity(m) for m in messages or []],
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    async def find_active_by_phone(self, phone_number: str) -> Optional[Conversation]:
        """
        Find the ACTIVE conversation for a phone number.

        Args:
            phone_number: Normalized phone number

        Returns:
            Most recent ACTIVE conversation, or None
        """
        db: Session = get_db_session()
        try:
            model = (
                db.query(ConversationModel)
                .filter(
                    ConversationModel.phone_number == phone_number,
                    ConversationModel.status == ConversationStatus.ACTIVE.value,
                )
                .order_by(ConversationModel.created_at.desc(), ConversationModel.id.desc())
                .first()
            )
            return self._model_to_entity(model) if model else None
        except SQLAlchemyError as e:
            logger.error(f"Database error while finding active conversation: {str(e)}")
            raise
        finally:
            db.close()

    async def get(self, conversation_id: int, with_messages: bool = False) -> Optional[Conversation]:
        """
        Get a conversation by id.

        Args:
            conversation_id: Conversation identifier
            with_messages: Whether to load the transcript

        Returns:
            Conversation entity, or None if not found
        """
        db: Session = get_db_session()
        try:
            model = (
                db.query(ConversationModel).filter(ConversationModel.id == conversation_id).first()
            )
            if model is None:
                return None
            messages = None
            if with_messages:
                messages = (
                    db.query(MessageModel)
                    .filter(MessageModel.conversation_id == conversation_id)
                    .order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())
                    .all()
                )
            return self._model_to_entity(model, messages)
        except SQLAlchemyError as e:
            logger.error(
                f"Database error while getting conversation {conversation_id}: {str(e)}"
            )
            raise
        finally:
            db.close()

    async def save(self, conversation: Conversation) -> Conversation:
        """
        Insert or update a conversation (messages are not written).

        Args:
            conversation: Conversation entity to save

        Returns:
            The saved conversation with its id assigned
        """
        db: Session = get_db_session()
        try:
            model = None
            if conversation.id is not None:
                model = (
                    db.query(ConversationModel)
                    .filter(ConversationModel.id == conversation.id)
                    .first()
                )

            if model is None:
                model = ConversationModel(
                    id=conversation.id,
                    phone_number=conversation.phone_number,
                    created_at=conversation.created_at,
                )
                db.add(model)

            model.status = conversation.status.value
            model.state = conversation.state.value
            model.is_returning_pharmacy = conversation.is_returning_pharmacy
            model.pharmacy_id = conversation.pharmacy_id
            model.pharmacy_data = conversation.pharmacy_data
            model.updated_at = conversation.updated_at

            db.commit()
            conversation.id = model.id
            return conversation
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Database error while saving conversation {conversation.id}: {str(e)}"
            )
            raise
        finally:
            db.close()

    async def append_message(self, message: Message) -> Message:
        """
        Append a message to a conversation transcript.

        Args:
            message: Message to persist

        Returns:
            The persisted message with its id assigned
        """
        db: Session = get_db_session()
        try:
            model = MessageModel(
                conversation_id=message.conversation_id,
                role=message.role.value,
                content=message.content,
                message_metadata=message.metadata,
                timestamp=message.timestamp,
            )
            db.add(model)
            db.commit()
            return self._message_to_entity(model)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Database error while appending message to conversation "
                f"{message.conversation_id}: {str(e)}"
            )
            raise
        finally:
            db.close()
