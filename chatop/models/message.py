"""Message model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from chatop.database import Base
from chatop.models.mixins import TimestampMixin


class Message(Base, TimestampMixin):
    """Inquiry sent by a prospective tenant about a rental."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    message = Column(String(2000), nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rental_id = Column(
        Integer, ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    user = relationship("User", backref="messages")
    rental = relationship("Rental", back_populates="messages")

    @property
    def rental_name(self) -> str:
        return self.rental.name
