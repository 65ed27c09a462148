"""Token service tests."""

from datetime import UTC, datetime, timedelta

import pytest

from chatop.config import Settings
from chatop.services.tokens import (
    TokenConfigurationError,
    TokenFailure,
    TokenService,
)

SECRET = "unit-test-signing-key-with-enough-bytes"  # noqa: S105


@pytest.fixture
def tokens():
    return TokenService(SECRET, ttl=timedelta(minutes=30))


def test_verify_issued_token(tokens):
    """A fresh token resolves to its subject."""
    result = tokens.verify(tokens.issue("alice@example.com"))
    assert result.is_valid
    assert result.subject == "alice@example.com"
    assert result.failure is None


def test_token_has_three_segments(tokens):
    assert tokens.issue("alice@example.com").count(".") == 2


def test_tokens_for_same_subject_are_independent():
    """Two tokens for one subject stay valid side by side."""
    now = datetime.now(UTC)
    earlier = TokenService(SECRET, clock=lambda: now - timedelta(minutes=5))
    later = TokenService(SECRET, clock=lambda: now)
    first = earlier.issue("alice@example.com")
    second = later.issue("alice@example.com")

    assert first != second
    assert later.verify(first).subject == "alice@example.com"
    assert later.verify(second).subject == "alice@example.com"


def test_expired_token(tokens):
    """A token past its expiry never yields a subject."""
    issued = datetime.now(UTC) - timedelta(hours=2)
    stale = TokenService(SECRET, ttl=timedelta(minutes=30), clock=lambda: issued)

    result = tokens.verify(stale.issue("alice@example.com"))
    assert result.failure is TokenFailure.EXPIRED
    assert result.subject is None


def test_tampered_signature(tokens):
    """Flipping a signature character invalidates the token."""
    token = tokens.issue("alice@example.com")
    header, claims, signature = token.split(".")
    middle = len(signature) // 2
    flipped = "A" if signature[middle] != "A" else "B"
    tampered = f"{header}.{claims}.{signature[:middle]}{flipped}{signature[middle + 1:]}"

    result = tokens.verify(tampered)
    assert result.failure is TokenFailure.INVALID_SIGNATURE
    assert result.subject is None


def test_token_signed_with_other_key(tokens):
    """Well-formed, unexpired claims do not help without the right key."""
    forged = TokenService("some-other-key-that-is-long-enough").issue("alice@example.com")
    result = tokens.verify(forged)
    assert result.failure is TokenFailure.INVALID_SIGNATURE
    assert result.subject is None


def test_claims_swapped_into_valid_token(tokens):
    """Claims from another subject under a genuine signature are rejected."""
    alice = tokens.issue("alice@example.com").split(".")
    bob = tokens.issue("bob@example.com").split(".")
    result = tokens.verify(f"{alice[0]}.{bob[1]}.{alice[2]}")
    assert result.failure is TokenFailure.INVALID_SIGNATURE


@pytest.mark.parametrize("token", ["", "garbage", "a.b", "not.a.token", "....."])
def test_malformed_token(tokens, token):
    result = tokens.verify(token)
    assert result.failure is TokenFailure.MALFORMED
    assert result.subject is None


def test_unsupported_algorithm(tokens):
    """A token using another algorithm is refused before its signature is read."""
    other = TokenService(SECRET, algorithm="HS512").issue("alice@example.com")
    result = tokens.verify(other)
    assert result.failure is TokenFailure.UNSUPPORTED_ALGORITHM
    assert result.subject is None


@pytest.mark.parametrize("secret", ["", "   "])
def test_empty_secret_is_fatal(secret):
    with pytest.raises(TokenConfigurationError):
        TokenService(secret)


def test_unknown_algorithm_is_fatal():
    with pytest.raises(TokenConfigurationError):
        TokenService(SECRET, algorithm="none")


def test_short_secret_is_fatal_in_production():
    settings = Settings(
        environment="production",
        jwt_secret="short-secret",
        database_url="postgresql://chatop:chatop@db/chatop",
    )
    with pytest.raises(TokenConfigurationError):
        TokenService.from_settings(settings)


def test_default_secret_is_rejected_in_production():
    with pytest.raises(ValueError):
        Settings(environment="production", database_url="postgresql://chatop:chatop@db/chatop")


def test_from_settings_uses_configured_lifetime():
    settings = Settings(jwt_expiration_minutes=15)
    assert TokenService.from_settings(settings).ttl == timedelta(minutes=15)
