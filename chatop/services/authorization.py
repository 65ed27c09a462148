"""Resource-level authorization rules.

Every rule evaluates in the same order: identity first, then existence of
the target resource, then ownership. Because existence is checked before
ownership, an authenticated non-owner can tell an existing id (403) from a
missing one (404). That trade-off is accepted and applies uniformly.
"""

import logging
from enum import Enum

from chatop.errors import BadRequestError, ForbiddenError, NotAuthenticatedError, NotFoundError
from chatop.models.message import Message
from chatop.models.rental import Rental
from chatop.services.identity import Authenticated, Identity

logger = logging.getLogger(__name__)


class Decision(Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"
    SELF_MESSAGE = "self-message"


def _is_owner(identity: Authenticated, rental: Rental) -> bool:
    return rental.owner.email == identity.email


def require_authenticated(identity: Identity) -> Decision:
    """Profile, rental creation and message listing only need a caller."""
    if not isinstance(identity, Authenticated):
        return Decision.UNAUTHENTICATED
    return Decision.ALLOW


def can_update_rental(identity: Identity, rental: Rental | None) -> Decision:
    if not isinstance(identity, Authenticated):
        return Decision.UNAUTHENTICATED
    if rental is None:
        return Decision.NOT_FOUND
    if not _is_owner(identity, rental):
        return Decision.FORBIDDEN
    return Decision.ALLOW


def can_send_message(identity: Identity, rental: Rental | None) -> Decision:
    """Anyone but the owner may write about a rental."""
    if not isinstance(identity, Authenticated):
        return Decision.UNAUTHENTICATED
    if rental is None:
        return Decision.NOT_FOUND
    if _is_owner(identity, rental):
        return Decision.SELF_MESSAGE
    return Decision.ALLOW


def can_view_message(identity: Identity, message: Message | None) -> Decision:
    """A message is visible to its sender and to the owner of its rental."""
    if not isinstance(identity, Authenticated):
        return Decision.UNAUTHENTICATED
    if message is None:
        return Decision.NOT_FOUND
    if message.user.email == identity.email or _is_owner(identity, message.rental):
        return Decision.ALLOW
    return Decision.FORBIDDEN


def can_view_rental_thread(
    identity: Identity, rental: Rental | None, has_written: bool
) -> Decision:
    """Owner, or someone who already wrote about the rental."""
    if not isinstance(identity, Authenticated):
        return Decision.UNAUTHENTICATED
    if rental is None:
        return Decision.NOT_FOUND
    if _is_owner(identity, rental) or has_written:
        return Decision.ALLOW
    return Decision.FORBIDDEN


def can_mark_message_read(identity: Identity, message: Message | None) -> Decision:
    """Only the recipient, the rental owner, marks a message read."""
    if not isinstance(identity, Authenticated):
        return Decision.UNAUTHENTICATED
    if message is None:
        return Decision.NOT_FOUND
    if not _is_owner(identity, message.rental):
        return Decision.FORBIDDEN
    return Decision.ALLOW


def enforce(
    decision: Decision,
    identity: Identity,
    operation: str,
    resource: str = "resource",
    resource_id: int | None = None,
) -> None:
    """Raise the rejection matching ``decision``; return quietly on ALLOW."""
    if decision is Decision.ALLOW:
        return

    subject = identity.email if isinstance(identity, Authenticated) else "anonymous"
    logger.warning(
        "Denied %s for %s on %s %s: %s", operation, subject, resource, resource_id, decision.value
    )

    label = resource.capitalize()
    prefix = resource.upper()
    if decision is Decision.UNAUTHENTICATED:
        raise NotAuthenticatedError()
    if decision is Decision.NOT_FOUND:
        raise NotFoundError(f"{label} not found", code=f"{prefix}_404")
    if decision is Decision.SELF_MESSAGE:
        raise BadRequestError("Cannot send message to your own rental", code="MESSAGE_400")
    raise ForbiddenError(f"Not authorized to {operation} this {resource}")
