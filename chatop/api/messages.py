"""Message API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from chatop.api.dependencies import authenticate_request, get_message_service
from chatop.schemas.message import (
    MessageCreate,
    MessageResponse,
    MessageSentResponse,
    UnreadCountResponse,
)
from chatop.services.identity import Identity
from chatop.services.message_service import MessageService

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=MessageSentResponse)
def send_message(
    message_data: MessageCreate,
    identity: Annotated[Identity, Depends(authenticate_request)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
):
    """Send a message about someone else's rental."""
    message_service.send_message(identity, message_data)
    return MessageSentResponse()


@router.get("", response_model=list[MessageResponse])
def get_my_messages(
    identity: Annotated[Identity, Depends(authenticate_request)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
):
    """Get messages sent or received by the current user, newest first."""
    return message_service.list_for_user(identity)


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    identity: Annotated[Identity, Depends(authenticate_request)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
):
    """Count unread messages received on the current user's rentals."""
    return UnreadCountResponse(count=message_service.unread_count(identity))


@router.get("/rental/{rental_id}", response_model=list[MessageResponse])
def get_rental_messages(
    rental_id: int,
    identity: Annotated[Identity, Depends(authenticate_request)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
):
    """Get the messages about one rental, oldest first."""
    return message_service.list_for_rental(identity, rental_id)


@router.get("/{message_id}", response_model=MessageResponse)
def get_message(
    message_id: int,
    identity: Annotated[Identity, Depends(authenticate_request)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
):
    """Get a specific message."""
    return message_service.get_message(identity, message_id)


@router.put("/{message_id}/read", response_model=MessageResponse)
def mark_message_read(
    message_id: int,
    identity: Annotated[Identity, Depends(authenticate_request)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
):
    """Mark a received message as read."""
    return message_service.mark_read(identity, message_id)
