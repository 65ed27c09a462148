"""Password hasher tests."""

import pytest

from chatop.services.passwords import PasswordHasher


@pytest.fixture(scope="module")
def hasher():
    return PasswordHasher(rounds=4)


def test_hash_then_verify(hasher):
    """The original password verifies against its hash."""
    password_hash = hasher.hash("password123")
    assert password_hash != "password123"
    assert hasher.verify("password123", password_hash) is True


def test_verify_wrong_password(hasher):
    """Any other password fails."""
    password_hash = hasher.hash("password123")
    assert hasher.verify("password124", password_hash) is False
    assert hasher.verify("", password_hash) is False


def test_hashes_are_salted(hasher):
    """Hashing twice gives different strings that both verify."""
    first = hasher.hash("password123")
    second = hasher.hash("password123")
    assert first != second
    assert hasher.verify("password123", first)
    assert hasher.verify("password123", second)


def test_cost_factor_is_encoded_in_hash():
    """The configured rounds end up in the bcrypt hash."""
    assert "$05$" in PasswordHasher(rounds=5).hash("password123")


@pytest.mark.parametrize("stored", ["", None, "not-a-hash", "$2b$04$truncated"])
def test_malformed_hash_fails_closed(hasher, stored):
    """A broken stored hash is a failed verification, not an exception."""
    assert hasher.verify("password123", stored) is False
