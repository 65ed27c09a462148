"""Authorization rule tests."""

from types import SimpleNamespace

import pytest

from chatop.errors import BadRequestError, ForbiddenError, NotAuthenticatedError, NotFoundError
from chatop.services.authorization import (
    Decision,
    can_mark_message_read,
    can_send_message,
    can_update_rental,
    can_view_message,
    can_view_rental_thread,
    enforce,
    require_authenticated,
)
from chatop.services.identity import ANONYMOUS, Authenticated

ALICE = Authenticated(user_id=1, email="alice@example.com")
BOB = Authenticated(user_id=2, email="bob@example.com")
CAROL = Authenticated(user_id=3, email="carol@example.com")


def make_rental(owner_email="alice@example.com"):
    return SimpleNamespace(id=10, owner=SimpleNamespace(email=owner_email))


def make_message(sender_email="bob@example.com", owner_email="alice@example.com"):
    return SimpleNamespace(
        id=20, user=SimpleNamespace(email=sender_email), rental=make_rental(owner_email)
    )


def test_identity_has_no_capabilities():
    assert ALICE.capabilities == frozenset()
    assert ALICE.is_authenticated
    assert not ANONYMOUS.is_authenticated


def test_require_authenticated():
    assert require_authenticated(ALICE) is Decision.ALLOW
    assert require_authenticated(ANONYMOUS) is Decision.UNAUTHENTICATED


def test_update_rental_rules():
    rental = make_rental()
    assert can_update_rental(ALICE, rental) is Decision.ALLOW
    assert can_update_rental(BOB, rental) is Decision.FORBIDDEN
    assert can_update_rental(ANONYMOUS, rental) is Decision.UNAUTHENTICATED


def test_missing_resource_is_not_found_before_ownership():
    """Existence is checked before ownership for every authenticated caller."""
    assert can_update_rental(BOB, None) is Decision.NOT_FOUND
    assert can_send_message(ALICE, None) is Decision.NOT_FOUND
    assert can_view_message(CAROL, None) is Decision.NOT_FOUND
    assert can_mark_message_read(BOB, None) is Decision.NOT_FOUND
    assert can_view_rental_thread(CAROL, None, has_written=False) is Decision.NOT_FOUND


def test_anonymous_is_unauthenticated_even_for_missing_resource():
    assert can_update_rental(ANONYMOUS, None) is Decision.UNAUTHENTICATED
    assert can_view_message(ANONYMOUS, None) is Decision.UNAUTHENTICATED


def test_owner_cannot_message_own_rental():
    rental = make_rental()
    assert can_send_message(ALICE, rental) is Decision.SELF_MESSAGE
    assert can_send_message(BOB, rental) is Decision.ALLOW


def test_message_visible_to_sender_and_owner_only():
    message = make_message()
    assert can_view_message(BOB, message) is Decision.ALLOW
    assert can_view_message(ALICE, message) is Decision.ALLOW
    assert can_view_message(CAROL, message) is Decision.FORBIDDEN


def test_rental_thread_visibility():
    rental = make_rental()
    assert can_view_rental_thread(ALICE, rental, has_written=False) is Decision.ALLOW
    assert can_view_rental_thread(BOB, rental, has_written=True) is Decision.ALLOW
    assert can_view_rental_thread(CAROL, rental, has_written=False) is Decision.FORBIDDEN


def test_only_owner_marks_read():
    message = make_message()
    assert can_mark_message_read(ALICE, message) is Decision.ALLOW
    assert can_mark_message_read(BOB, message) is Decision.FORBIDDEN


@pytest.mark.parametrize(
    "decision, error, status_code",
    [
        (Decision.UNAUTHENTICATED, NotAuthenticatedError, 401),
        (Decision.FORBIDDEN, ForbiddenError, 403),
        (Decision.NOT_FOUND, NotFoundError, 404),
        (Decision.SELF_MESSAGE, BadRequestError, 400),
    ],
)
def test_enforce_raises_matching_error(decision, error, status_code):
    with pytest.raises(error) as exc_info:
        enforce(decision, BOB, "update", "rental", 10)
    assert exc_info.value.status_code == status_code


def test_enforce_not_found_code_names_resource():
    with pytest.raises(NotFoundError) as exc_info:
        enforce(Decision.NOT_FOUND, BOB, "view", "message", 99)
    assert exc_info.value.code == "MESSAGE_404"
    assert exc_info.value.message == "Message not found"


def test_enforce_allow_is_silent():
    assert enforce(Decision.ALLOW, ALICE, "update", "rental", 10) is None
