"""Rental persistence and ownership-checked updates."""

import logging
from decimal import Decimal

from fastapi import UploadFile
from sqlalchemy.orm import Session

from chatop.models.rental import Rental
from chatop.services.authorization import can_update_rental, enforce, require_authenticated
from chatop.services.identity import Identity
from chatop.services.storage import ImageStorage

logger = logging.getLogger(__name__)


class RentalService:
    """Service for rental-related operations."""

    def __init__(self, db: Session, storage: ImageStorage):
        self.db = db
        self.storage = storage

    def list_rentals(self) -> list[Rental]:
        return self.db.query(Rental).order_by(Rental.id).all()

    def get_rental(self, rental_id: int) -> Rental | None:
        return self.db.query(Rental).filter(Rental.id == rental_id).first()

    def list_owned_by(self, user_id: int) -> list[Rental]:
        return self.db.query(Rental).filter(Rental.owner_id == user_id).order_by(Rental.id).all()

    async def create_rental(
        self,
        identity: Identity,
        *,
        name: str,
        surface: Decimal,
        price: Decimal,
        description: str | None,
        picture: UploadFile,
    ) -> Rental:
        """Create a rental owned by the caller; the picture is mandatory."""
        enforce(require_authenticated(identity), identity, "create", "rental")

        picture_url = await self.storage.save(picture)
        rental = Rental(
            name=name,
            surface=surface,
            price=price,
            description=description,
            picture=picture_url,
            owner_id=identity.user_id,
        )
        self.db.add(rental)
        self._commit(picture_url)
        self.db.refresh(rental)

        logger.info("Rental %s created by %s", rental.id, identity.email)
        return rental

    async def update_rental(
        self,
        identity: Identity,
        rental_id: int,
        *,
        name: str,
        surface: Decimal,
        price: Decimal,
        description: str | None,
        picture: UploadFile | None = None,
    ) -> Rental:
        """Update a rental; only its owner may. The stored picture is kept when none is sent."""
        rental = self.get_rental(rental_id)
        enforce(can_update_rental(identity, rental), identity, "update", "rental", rental_id)

        new_picture = None
        if picture is not None and picture.filename:
            new_picture = await self.storage.save(picture)
            rental.picture = new_picture
        rental.name = name
        rental.surface = surface
        rental.price = price
        rental.description = description
        self._commit(new_picture)
        self.db.refresh(rental)

        logger.info("Rental %s updated by %s", rental.id, identity.email)
        return rental

    def _commit(self, stored_picture: str | None) -> None:
        """Commit, removing a picture stored for this change if the commit fails."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            if stored_picture is not None:
                self.storage.delete(stored_picture)
                logger.warning("Discarded picture %s after a failed commit", stored_picture)
            raise
