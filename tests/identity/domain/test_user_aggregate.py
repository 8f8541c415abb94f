"""Tests for the User aggregate: registration, roles and the address book."""

import pytest
from protean.exceptions import ValidationError
from storefront.errors import Forbidden, InvalidRequest, NotFound
from storefront.identity.events import RoleAssigned, UserRegistered
from storefront.identity.user import Role, User


def _user(email="Jane@Example.com"):
    return User.register(email=email, name="Jane")


def _address(user, street="1 Main St", is_default=False):
    return user.add_address(
        street=street,
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="US",
        is_default=is_default,
    )


class TestRegistration:
    def test_new_users_are_customers(self):
        user = _user()
        assert user.role == Role.CUSTOMER.value
        assert user.is_customer
        assert not user.is_staff

    def test_email_is_normalized(self):
        assert _user().email == "jane@example.com"

    def test_register_raises_event(self):
        user = _user()
        assert any(isinstance(e, UserRegistered) for e in user._events)

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            User.register(email="not-an-email")


class TestSignIn:
    def test_sign_in_refreshes_profile(self):
        user = _user()
        user.record_sign_in(name="Jane D", image="https://cdn.example.com/j.png", provider="google")
        assert user.name == "Jane D"
        assert user.image == "https://cdn.example.com/j.png"

    def test_sign_in_keeps_name_when_absent(self):
        user = _user()
        user.record_sign_in(provider="google")
        assert user.name == "Jane"

    def test_link_account_once(self):
        user = _user()
        assert user.link_account("google", "123") is True
        assert user.link_account("google", "123") is False
        assert len(user.accounts) == 1

    def test_unlinked_user_accepts_any_account(self):
        assert _user().accepts_sign_in_from("google", "123") is True

    def test_linked_user_accepts_only_linked_accounts(self):
        user = _user()
        user.link_account("google", "123")
        assert user.accepts_sign_in_from("google", "123") is True
        assert user.accepts_sign_in_from("google", "456") is False
        assert user.accepts_sign_in_from("github", "123") is False
        assert user.accepts_sign_in_from(None, None) is False


class TestRoles:
    def test_staff_roles(self):
        user = _user()
        user.assign_role(Role.MANAGER.value, assigned_by="admin-1")
        assert user.is_staff
        assert not user.is_customer

    def test_assign_role_raises_event(self):
        user = _user()
        user.assign_role(Role.ADMIN.value, assigned_by="admin-1")
        event = next(e for e in user._events if isinstance(e, RoleAssigned))
        assert event.previous_role == "CUSTOMER"
        assert event.new_role == "ADMIN"

    def test_unknown_role_rejected(self):
        user = _user()
        with pytest.raises(InvalidRequest) as exc:
            user.assign_role("OWNER", assigned_by="admin-1")
        assert exc.value.code == "INVALID_ROLE"

    def test_cannot_change_own_role(self):
        user = _user()
        with pytest.raises(Forbidden):
            user.assign_role(Role.ADMIN.value, assigned_by=user.id)


class TestAddressBook:
    def test_first_address_becomes_default(self):
        user = _user()
        address = _address(user)
        assert address.is_default is True

    def test_second_address_is_not_default(self):
        user = _user()
        _address(user)
        second = _address(user, street="2 Side St")
        assert second.is_default is False

    def test_new_default_clears_previous(self):
        user = _user()
        first = _address(user)
        second = _address(user, street="2 Side St", is_default=True)
        assert user.find_address(first.id).is_default is False
        assert user.find_address(second.id).is_default is True

    def test_set_default_address(self):
        user = _user()
        first = _address(user)
        second = _address(user, street="2 Side St")
        user.set_default_address(second.id)
        assert user.find_address(second.id).is_default is True
        assert user.find_address(first.id).is_default is False

    def test_remove_address(self):
        user = _user()
        address = _address(user)
        user.remove_address(address.id)
        assert user.find_address(address.id) is None

    def test_remove_unknown_address(self):
        with pytest.raises(NotFound):
            _user().remove_address("missing")

    def test_find_address_without_id(self):
        assert _user().find_address(None) is None
