"""Rental model."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from chatop.database import Base
from chatop.models.mixins import TimestampMixin


class Rental(Base, TimestampMixin):
    """A rental property listed by its owner."""

    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    surface = Column(Numeric(10, 2), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    picture = Column(String(255), nullable=True)  # URL of the stored image
    description = Column(String(2000), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", backref="rentals")
    messages = relationship("Message", back_populates="rental", cascade="all, delete-orphan")
