"""FastAPI dependencies: authentication gate, services and collaborators."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from chatop.database import get_db
from chatop.services.auth import AuthService, get_user_by_email
from chatop.services.identity import ANONYMOUS, Authenticated, Identity
from chatop.services.message_service import MessageService
from chatop.services.passwords import PasswordHasher
from chatop.services.rental_service import RentalService
from chatop.services.storage import ImageStorage
from chatop.services.tokens import TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Reachable without any identity resolution. Each entry matches itself and the
# paths below it, never a longer sibling such as /docsx.
PUBLIC_PATHS = (
    "/api/auth/register",
    "/api/auth/login",
    "/images",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/health",
)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


def is_public_path(path: str) -> bool:
    return any(path == public or path.startswith(public + "/") for public in PUBLIC_PATHS)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header.

    The prefix match is exact: case-sensitive with a single space.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :]
    return token or None


def authenticate_request(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    """Resolve the caller's identity from the bearer token.

    Never rejects: a missing or bad token leaves the request anonymous and the
    authorization rules decide later whether that matters.
    """
    request.state.identity = ANONYMOUS
    if is_public_path(request.url.path):
        return ANONYMOUS

    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        return ANONYMOUS

    verification = tokens.verify(token)
    if not verification.is_valid:
        logger.warning(
            "Ignoring %s token on %s %s", verification.failure, request.method, request.url.path
        )
        return ANONYMOUS

    user = get_user_by_email(db, verification.subject)
    if user is None:
        logger.warning("Token subject %s has no account", verification.subject)
        return ANONYMOUS

    identity = Authenticated.from_user(user)
    request.state.identity = identity
    logger.debug("Authenticated %s on %s", identity.email, request.url.path)
    return identity


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, hasher, tokens)


def get_rental_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ImageStorage, Depends(get_image_storage)],
) -> RentalService:
    """Get rental service with dependencies."""
    return RentalService(db, storage)


def get_message_service(
    db: Annotated[Session, Depends(get_db)],
) -> MessageService:
    """Get message service with dependencies."""
    return MessageService(db)
