"""User aggregate root with Address and LinkedAccount entities.

Users are never created by self-registration: the identity provider calls
the upsert operation (see ``authentication.py``) on every sign-in and the
user record is created the first time an email is seen. Roles start at
CUSTOMER and can only be changed by an administrator acting on someone else.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String

from storefront.domain import storefront
from storefront.errors import Forbidden, InvalidRequest, NotFound
from storefront.identity.events import (
    AddressAdded,
    AddressRemoved,
    RoleAssigned,
    UserRegistered,
    UserSignedIn,
)


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


STAFF_ROLES = frozenset({Role.MANAGER.value, Role.ADMIN.value})


def normalize_email(email):
    return email.strip().lower() if email else email


@storefront.entity(part_of="User")
class Address:
    """A shipping address in a user's address book.

    ``is_default`` is a convenience for the checkout form only; nothing
    relies on exactly one address being flagged.
    """

    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    is_default: Boolean(default=False)


@storefront.entity(part_of="User")
class LinkedAccount:
    """An external identity (e.g. an OAuth provider account) bound to the user."""

    provider: String(required=True, max_length=50)
    provider_account_id: String(required=True, max_length=255)


@storefront.aggregate
class User:
    email: String(required=True, max_length=254, unique=True)
    name: String(max_length=255)
    image: String(max_length=500)
    role: String(choices=Role, default=Role.CUSTOMER.value)
    addresses: HasMany(Address)
    accounts: HasMany(LinkedAccount)
    created_at: DateTime()
    last_sign_in_at: DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        if self.email and "@" not in self.email:
            raise ValidationError({"email": ["Invalid email address"]})

    @classmethod
    def register(cls, email, name=None, image=None):
        now = datetime.now(UTC)
        user = cls(
            email=normalize_email(email),
            name=name,
            image=image,
            role=Role.CUSTOMER.value,
            created_at=now,
            last_sign_in_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER.value

    # -------------------------------------------------------------------
    # Sign-in
    # -------------------------------------------------------------------
    def record_sign_in(self, name=None, image=None, provider=None):
        """Refresh profile details supplied by the identity provider."""
        now = datetime.now(UTC)
        if name:
            self.name = name
        if image:
            self.image = image
        self.last_sign_in_at = now

        self.raise_(
            UserSignedIn(
                user_id=str(self.id),
                provider=provider,
                signed_in_at=now,
            )
        )

    def is_linked_to(self, provider, provider_account_id) -> bool:
        return any(
            a.provider == provider and a.provider_account_id == str(provider_account_id) for a in self.accounts
        )

    def accepts_sign_in_from(self, provider, provider_account_id) -> bool:
        """A user with linked accounts only signs in through one of them."""
        if not self.accounts:
            return True
        return bool(provider and provider_account_id) and self.is_linked_to(provider, provider_account_id)

    def link_account(self, provider, provider_account_id):
        """Bind an external account once; repeated calls are no-ops."""
        if self.is_linked_to(provider, provider_account_id):
            return False

        self.add_accounts(LinkedAccount(provider=provider, provider_account_id=str(provider_account_id)))
        return True

    # -------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------
    def assign_role(self, role, assigned_by):
        if role not in {r.value for r in Role}:
            raise InvalidRequest(f"Unknown role: {role}", code="INVALID_ROLE")
        if str(assigned_by) == str(self.id):
            raise Forbidden("Users cannot change their own role")

        previous = self.role
        self.role = role
        self.raise_(
            RoleAssigned(
                user_id=str(self.id),
                previous_role=previous,
                new_role=role,
                assigned_by=str(assigned_by),
            )
        )

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def find_address(self, address_id):
        if not address_id:
            return None
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    def add_address(self, street, city, postal_code, country, state=None, is_default=False):
        # The first address always becomes the default
        make_default = is_default or not self.addresses
        if make_default:
            for existing in self.addresses:
                existing.is_default = False

        address = Address(
            street=street,
            city=city,
            state=state,
            postal_code=postal_code,
            country=country,
            is_default=make_default,
        )
        self.add_addresses(address)

        self.raise_(
            AddressAdded(
                user_id=str(self.id),
                address_id=str(address.id),
                is_default=make_default,
            )
        )
        return address

    def remove_address(self, address_id):
        address = self.find_address(address_id)
        if address is None:
            raise NotFound("Address not found")

        self.remove_addresses(address)
        self.raise_(AddressRemoved(user_id=str(self.id), address_id=str(address_id)))

    def set_default_address(self, address_id):
        address = self.find_address(address_id)
        if address is None:
            raise NotFound("Address not found")

        for existing in self.addresses:
            existing.is_default = str(existing.id) == str(address_id)
