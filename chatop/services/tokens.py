"""Stateless signed bearer tokens.

Tokens are compact HS256 JWTs carrying ``sub`` (the user's email), ``iat`` and
``exp``. Verification is a pure signature + expiry check: nothing is stored
server-side, so there is no revocation. Logging out only means the client
drops its token; any token issued earlier stays valid until its own expiry.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from jose import ExpiredSignatureError, JWTError, jwk, jwt
from jose.utils import base64url_decode

from chatop.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
MIN_PRODUCTION_SECRET_BYTES = 32


class TokenConfigurationError(RuntimeError):
    """Signing key or algorithm unusable; the process must not serve traffic."""


class TokenFailure(StrEnum):
    """Why a token did not verify."""

    EXPIRED = "expired"
    MALFORMED = "malformed"
    UNSUPPORTED_ALGORITHM = "unsupported-algorithm"
    INVALID_SIGNATURE = "invalid-signature"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying a token: a subject, or the reason there is none."""

    subject: str | None = None
    failure: TokenFailure | None = None

    @property
    def is_valid(self) -> bool:
        return self.failure is None

    @classmethod
    def valid(cls, subject: str) -> "TokenVerification":
        return cls(subject=subject)

    @classmethod
    def rejected(cls, failure: TokenFailure) -> "TokenVerification":
        return cls(failure=failure)


class TokenService:
    """Issues and verifies bearer tokens with a key fixed for the process lifetime."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] | None = None,
        require_strong_secret: bool = False,
    ):
        if not secret or not secret.strip():
            raise TokenConfigurationError("JWT signing secret must not be empty")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise TokenConfigurationError(f"Unsupported JWT algorithm: {algorithm}")
        if require_strong_secret and len(secret.encode()) < MIN_PRODUCTION_SECRET_BYTES:
            raise TokenConfigurationError(
                f"JWT signing secret must be at least {MIN_PRODUCTION_SECRET_BYTES} bytes"
            )
        if ttl <= timedelta(0):
            raise TokenConfigurationError("Token lifetime must be positive")
        self._secret = secret
        self._key = jwk.construct(secret, algorithm)
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(minutes=settings.jwt_expiration_minutes),
            require_strong_secret=settings.is_production,
        )

    def issue(self, subject: str) -> str:
        """Create a signed token for ``subject`` expiring after the configured TTL."""
        issued_at = self._clock()
        claims = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenVerification:
        """Check signature, then expiry.

        The claims are only read once the signature is known to be good, so a
        forged token never yields a subject.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            return TokenVerification.rejected(TokenFailure.MALFORMED)

        if header.get("alg") != self.algorithm:
            return TokenVerification.rejected(TokenFailure.UNSUPPORTED_ALGORITHM)

        signing_input, _, encoded_signature = token.rpartition(".")
        try:
            signature = base64url_decode(encoded_signature.encode())
        except ValueError:
            return TokenVerification.rejected(TokenFailure.MALFORMED)
        if not self._key.verify(signing_input.encode(), signature):
            return TokenVerification.rejected(TokenFailure.INVALID_SIGNATURE)

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return TokenVerification.rejected(TokenFailure.EXPIRED)
        except JWTError:
            return TokenVerification.rejected(TokenFailure.MALFORMED)

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject or "exp" not in claims:
            return TokenVerification.rejected(TokenFailure.MALFORMED)
        return TokenVerification.valid(subject)
