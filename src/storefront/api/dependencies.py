"""Request dependencies shared by the routers."""

import hmac

import structlog
from fastapi import Header

from storefront import config
from storefront.errors import NotAuthenticated
from storefront.utils.logging import bind_request_context

logger = structlog.get_logger(__name__)


async def current_user_id(x_user_id: str | None = Header(None, alias=config.USER_ID_HEADER)) -> str:
    """The authenticated caller's id, as asserted by the gateway.

    Only the id is taken from the request. Handlers load the user and read
    the role from the store.
    """
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticated()
    user_id = x_user_id.strip()
    bind_request_context(user_id=user_id)
    return user_id


async def identity_provider(
    x_identity_secret: str | None = Header(None, alias=config.IDENTITY_SECRET_HEADER),
) -> None:
    """Admit only the identity provider, which presents the shared secret."""
    expected = config.identity_provider_secret()
    if expected is None:
        logger.warning("Identity upsert refused, no provider secret configured")
        raise NotAuthenticated()

    presented = (x_identity_secret or "").encode()
    if not hmac.compare_digest(presented, expected.encode()):
        logger.warning("Identity upsert refused, bad provider secret")
        raise NotAuthenticated()
