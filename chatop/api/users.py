"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chatop.api.dependencies import authenticate_request
from chatop.database import get_db
from chatop.errors import NotFoundError
from chatop.schemas.user import UserResponse
from chatop.services.auth import get_user_by_id
from chatop.services.authorization import enforce, require_authenticated
from chatop.services.identity import Identity

router = APIRouter(prefix="/api/user", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    identity: Annotated[Identity, Depends(authenticate_request)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a user's public profile, e.g. a rental owner."""
    enforce(require_authenticated(identity), identity, "view", "user", user_id)
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_404")
    return user
