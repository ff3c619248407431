"""Tests for idstore/user/emails.py - secondary email addresses."""

import pytest

from idstore.core.exceptions import ValidationError
from idstore.user.emails import UserEmailsStore
from idstore.user.exceptions import (
    EmailAddressNotExistError,
    EmailAlreadyUsedError,
    UserNotExistError,
)
from idstore.user.schemas import CreateUserOptions
from idstore.user.store import UsersStore


def test_create_unactivated_address(users: UsersStore, emails: UserEmailsStore):
    bob = users.create("bob", "bob@example.com")

    address = emails.create(bob.id, "Bob2@Example.com")

    assert address.owner_id == bob.id
    assert address.email == "bob2@example.com"
    assert address.is_activated is False
    with pytest.raises(UserNotExistError):
        users.get_by_email("bob2@example.com")


def test_verify_makes_address_resolvable(users: UsersStore, emails: UserEmailsStore):
    bob = users.create("bob", "bob@example.com")
    emails.create(bob.id, "bob2@example.com")

    address = emails.verify("bob2@example.com")

    assert address.is_activated is True
    assert users.get_by_email("bob2@example.com").id == bob.id


def test_verify_is_idempotent(users: UsersStore, emails: UserEmailsStore):
    bob = users.create("bob", "bob@example.com")
    emails.create(bob.id, "bob2@example.com", activated=True)

    assert emails.verify("bob2@example.com").is_activated is True


def test_verify_unknown_address(emails: UserEmailsStore):
    with pytest.raises(EmailAddressNotExistError) as exc_info:
        emails.verify("ghost@example.com")

    assert exc_info.value == EmailAddressNotExistError(email="ghost@example.com")


def test_create_rejects_address_in_table(users: UsersStore, emails: UserEmailsStore):
    alice = users.create("alice", "alice@example.com")
    bob = users.create("bob", "bob@example.com")
    emails.create(alice.id, "shared@example.com")

    with pytest.raises(EmailAlreadyUsedError) as exc_info:
        emails.create(bob.id, "SHARED@example.com")

    assert exc_info.value.details == {"email": "shared@example.com"}


def test_create_rejects_primary_email_of_active_user(
    users: UsersStore, emails: UserEmailsStore
):
    users.create("alice", "alice@example.com", CreateUserOptions(activated=True))
    bob = users.create("bob", "bob@example.com")

    with pytest.raises(EmailAlreadyUsedError):
        emails.create(bob.id, "alice@example.com")


def test_verify_rejects_address_claimed_by_active_user(
    users: UsersStore, emails: UserEmailsStore
):
    bob = users.create("bob", "bob@example.com")
    emails.create(bob.id, "late@example.com")
    users.create("late", "late@example.com", CreateUserOptions(activated=True))

    with pytest.raises(EmailAlreadyUsedError):
        emails.verify("late@example.com")


def test_create_for_unknown_owner(emails: UserEmailsStore):
    with pytest.raises(UserNotExistError) as exc_info:
        emails.create(404, "ghost@example.com")

    assert exc_info.value.details == {"userID": 404}


def test_create_rejects_empty_address(users: UsersStore, emails: UserEmailsStore):
    bob = users.create("bob", "bob@example.com")

    with pytest.raises(ValidationError):
        emails.create(bob.id, "   ")


def test_list_by_owner(users: UsersStore, emails: UserEmailsStore):
    bob = users.create("bob", "bob@example.com")
    alice = users.create("alice", "alice@example.com")
    emails.create(bob.id, "bob2@example.com")
    emails.create(bob.id, "bob3@example.com", activated=True)
    emails.create(alice.id, "alice2@example.com")

    addresses = emails.list_by_owner(bob.id)

    assert [a.email for a in addresses] == ["bob2@example.com", "bob3@example.com"]
