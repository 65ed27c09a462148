"""Inquiry messages between prospective tenants and rental owners."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from chatop.errors import ForbiddenError
from chatop.models.message import Message
from chatop.models.rental import Rental
from chatop.schemas.message import MessageCreate
from chatop.services.authorization import (
    can_mark_message_read,
    can_send_message,
    can_view_message,
    can_view_rental_thread,
    enforce,
    require_authenticated,
)
from chatop.services.identity import Identity

logger = logging.getLogger(__name__)


class MessageService:
    """Service for message-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def _get_message(self, message_id: int) -> Message | None:
        return self.db.query(Message).filter(Message.id == message_id).first()

    def _get_rental(self, rental_id: int) -> Rental | None:
        return self.db.query(Rental).filter(Rental.id == rental_id).first()

    def send_message(self, identity: Identity, data: MessageCreate) -> Message:
        """Store a message from the caller about someone else's rental."""
        enforce(require_authenticated(identity), identity, "send", "message")
        if data.user_id is not None and data.user_id != identity.user_id:
            logger.warning(
                "Token user %s does not match user_id %s in message body",
                identity.email,
                data.user_id,
            )
            raise ForbiddenError("Token does not match the provided user_id")

        rental = self._get_rental(data.rental_id)
        enforce(can_send_message(identity, rental), identity, "message", "rental", data.rental_id)

        message = Message(
            message=data.message,
            user_id=identity.user_id,
            rental_id=rental.id,
            read=False,
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)

        logger.info(
            "Message %s sent by %s about rental %s", message.id, identity.email, rental.id
        )
        return message

    def list_for_user(self, identity: Identity) -> list[Message]:
        """Messages the caller sent or received on their rentals, newest first."""
        enforce(require_authenticated(identity), identity, "list", "message")
        return (
            self.db.query(Message)
            .join(Rental, Message.rental_id == Rental.id)
            .filter(or_(Message.user_id == identity.user_id, Rental.owner_id == identity.user_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .all()
        )

    def get_message(self, identity: Identity, message_id: int) -> Message:
        message = self._get_message(message_id)
        enforce(can_view_message(identity, message), identity, "view", "message", message_id)
        return message

    def list_for_rental(self, identity: Identity, rental_id: int) -> list[Message]:
        """Thread about one rental, oldest first."""
        rental = self._get_rental(rental_id)
        has_written = False
        if rental is not None and identity.is_authenticated:
            has_written = (
                self.db.query(Message.id)
                .filter(Message.rental_id == rental_id, Message.user_id == identity.user_id)
                .first()
                is not None
            )
        enforce(
            can_view_rental_thread(identity, rental, has_written),
            identity,
            "view messages of",
            "rental",
            rental_id,
        )
        return (
            self.db.query(Message)
            .filter(Message.rental_id == rental_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    def mark_read(self, identity: Identity, message_id: int) -> Message:
        """Mark a received message as read. Marking twice is harmless."""
        message = self._get_message(message_id)
        enforce(can_mark_message_read(identity, message), identity, "mark", "message", message_id)
        if not message.read:
            message.read = True
            self.db.commit()
            self.db.refresh(message)
            logger.info("Message %s marked read by %s", message_id, identity.email)
        return message

    def unread_count(self, identity: Identity) -> int:
        """Unread messages received on the caller's rentals."""
        enforce(require_authenticated(identity), identity, "count", "message")
        count = (
            self.db.query(func.count(Message.id))
            .join(Rental, Message.rental_id == Rental.id)
            .filter(Rental.owner_id == identity.user_id, Message.read == False)  # noqa: E712
            .scalar()
        )
        return count or 0
