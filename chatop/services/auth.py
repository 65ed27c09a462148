"""Registration, login and identity resolution."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chatop.errors import CredentialConflictError, InvalidCredentialsError
from chatop.models.user import User
from chatop.services.passwords import PasswordHasher
from chatop.services.tokens import TokenService

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def email_exists(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == normalize_email(email)).first() is not None


class AuthService:
    """Account creation and credential checks; both end in a fresh token."""

    def __init__(self, db: Session, hasher: PasswordHasher, tokens: TokenService):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens

    def register(self, email: str, name: str, password: str) -> str:
        """Create a user and return a token for it."""
        email = normalize_email(email)
        logger.info("Registering user %s", email)
        if email_exists(self.db, email):
            logger.warning("Registration refused, email already registered: %s", email)
            raise CredentialConflictError()

        user = User(email=email, name=name, password_hash=self.hasher.hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            self.db.rollback()
            logger.warning("Registration refused, email already registered: %s", email)
            raise CredentialConflictError() from None
        self.db.refresh(user)

        logger.info("User registered with id %s", user.id)
        return self.tokens.issue(user.email)

    def login(self, email: str, password: str) -> str:
        """Check credentials and return a token.

        Unknown email and wrong password produce the same error.
        """
        email = normalize_email(email)
        user = get_user_by_email(self.db, email)
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.warning("Login failed for %s", email)
            raise InvalidCredentialsError()

        logger.info("User logged in: %s", email)
        return self.tokens.issue(user.email)
