"""SQLAlchemy models."""

from chatop.models.message import Message
from chatop.models.rental import Rental
from chatop.models.user import User

__all__ = [
    "User",
    "Rental",
    "Message",
]
