"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chatop.api.dependencies import authenticate_request, get_auth_service
from chatop.database import get_db
from chatop.errors import NotAuthenticatedError
from chatop.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from chatop.schemas.user import UserResponse
from chatop.services.auth import AuthService, get_user_by_id
from chatop.services.authorization import enforce, require_authenticated
from chatop.services.identity import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse)
def register(
    user_data: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and log them in."""
    token = auth_service.register(user_data.email, user_data.name, user_data.password)
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    token = auth_service.login(credentials.email, credentials.password)
    return TokenResponse(token=token)


@router.get("/me", response_model=UserResponse)
def get_me(
    identity: Annotated[Identity, Depends(authenticate_request)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get current user information."""
    enforce(require_authenticated(identity), identity, "view", "profile")
    user = get_user_by_id(db, identity.user_id)
    if user is None:
        raise NotAuthenticatedError()
    return user


@router.post("/logout")
def logout(
    identity: Annotated[Identity, Depends(authenticate_request)],
):
    """Logout (client should discard token).

    Tokens are not revoked server-side and remain valid until they expire.
    """
    enforce(require_authenticated(identity), identity, "logout", "session")
    logger.info("User %s logged out", identity.email)
    return {"message": "Logged out successfully"}
