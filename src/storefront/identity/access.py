"""Caller resolution and role checks used by every command handler.

Handlers receive the caller's user id and look the user up themselves, so a
role is always read from the store and never trusted from the request.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import Forbidden, NotAuthenticated
from storefront.identity.user import User


def load_caller(user_id) -> User:
    if not user_id:
        raise NotAuthenticated()
    try:
        return current_domain.repository_for(User).get(str(user_id))
    except ObjectNotFoundError:
        raise NotAuthenticated() from None


def require_staff(user_id) -> User:
    caller = load_caller(user_id)
    if not caller.is_staff:
        raise Forbidden()
    return caller


def require_customer(user_id, message=None) -> User:
    caller = load_caller(user_id)
    if not caller.is_customer:
        raise Forbidden(message)
    return caller
