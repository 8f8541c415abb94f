"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A person signed in for the first time and now has an account."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True, max_length=254)
    role: String(required=True, max_length=20)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserSignedIn:
    __version__ = 1

    user_id: Identifier(required=True)
    provider: String(max_length=50)
    signed_in_at: DateTime(required=True)


@storefront.event(part_of="User")
class RoleAssigned:
    """An administrator changed a user's role."""

    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True, max_length=20)
    new_role: String(required=True, max_length=20)
    assigned_by: String(required=True, max_length=255)


@storefront.event(part_of="User")
class AddressAdded:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    is_default: Boolean(default=False)


@storefront.event(part_of="User")
class AddressRemoved:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
