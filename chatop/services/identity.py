"""Request identity: anonymous, or an authenticated user."""

from dataclasses import dataclass

from chatop.models.user import User


@dataclass(frozen=True)
class Anonymous:
    """No valid token was presented. Not an error on its own."""

    is_authenticated = False


@dataclass(frozen=True)
class Authenticated:
    """A verified token resolved to a stored user.

    All authenticated users share one implicit capability level, so the
    capability set is always empty; ownership decides everything else.
    """

    user_id: int
    email: str
    capabilities: frozenset[str] = frozenset()

    is_authenticated = True

    @classmethod
    def from_user(cls, user: User) -> "Authenticated":
        return cls(user_id=user.id, email=user.email)


Identity = Anonymous | Authenticated

ANONYMOUS = Anonymous()
