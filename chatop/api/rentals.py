"""Rental API endpoints."""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from chatop.api.dependencies import authenticate_request, get_rental_service
from chatop.errors import NotFoundError
from chatop.schemas.rental import RentalResponse
from chatop.services.authorization import enforce, require_authenticated
from chatop.services.identity import Identity
from chatop.services.rental_service import RentalService

router = APIRouter(prefix="/api/rentals", tags=["rentals"])

RentalName = Annotated[str, Form(min_length=2, max_length=100)]
Surface = Annotated[Decimal, Form(gt=0, max_digits=10, decimal_places=2)]
Price = Annotated[Decimal, Form(gt=0, max_digits=10, decimal_places=2)]
Description = Annotated[str | None, Form(max_length=2000)]


@router.get("", response_model=list[RentalResponse])
def get_rentals(
    rental_service: Annotated[RentalService, Depends(get_rental_service)],
):
    """Get all rentals. Public."""
    return rental_service.list_rentals()


@router.get("/user", response_model=list[RentalResponse])
def get_my_rentals(
    identity: Annotated[Identity, Depends(authenticate_request)],
    rental_service: Annotated[RentalService, Depends(get_rental_service)],
):
    """Get the rentals owned by the current user."""
    enforce(require_authenticated(identity), identity, "list", "rental")
    return rental_service.list_owned_by(identity.user_id)


@router.get("/{rental_id}", response_model=RentalResponse)
def get_rental(
    rental_id: int,
    rental_service: Annotated[RentalService, Depends(get_rental_service)],
):
    """Get a specific rental. Public."""
    rental = rental_service.get_rental(rental_id)
    if rental is None:
        raise NotFoundError("Rental not found", code="RENTAL_404")
    return rental


@router.post("", response_model=RentalResponse, status_code=status.HTTP_201_CREATED)
async def create_rental(
    name: RentalName,
    surface: Surface,
    price: Price,
    picture: Annotated[UploadFile, File(description="Rental picture")],
    identity: Annotated[Identity, Depends(authenticate_request)],
    rental_service: Annotated[RentalService, Depends(get_rental_service)],
    description: Description = None,
):
    """Create a new rental owned by the current user.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    return await rental_service.create_rental(
        identity,
        name=name,
        surface=surface,
        price=price,
        description=description,
        picture=picture,
    )


@router.put("/{rental_id}", response_model=RentalResponse)
async def update_rental(
    rental_id: int,
    name: RentalName,
    surface: Surface,
    price: Price,
    identity: Annotated[Identity, Depends(authenticate_request)],
    rental_service: Annotated[RentalService, Depends(get_rental_service)],
    description: Description = None,
    picture: Annotated[UploadFile | None, File(description="Replacement picture")] = None,
):
    """Update a rental. Only its owner may."""
    return await rental_service.update_rental(
        identity,
        rental_id,
        name=name,
        surface=surface,
        price=price,
        description=description,
        picture=picture,
    )
