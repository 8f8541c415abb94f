"""Behaviour switches read from the environment.

Values are read on every call so a running process (or a test using
``monkeypatch.setenv``) picks up changes without re-importing anything.
"""

import os

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

# Header set by the identity provider's gateway once a caller is authenticated
USER_ID_HEADER = "X-User-Id"

# Header carrying the shared secret the identity provider presents on sign-in
IDENTITY_SECRET_HEADER = "X-Identity-Secret"


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default

    value = value.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


def strict_order_transitions() -> bool:
    """Enforce PENDING → PROCESSING → SHIPPED → DELIVERED and cancel-from-open-only."""
    return _flag("STOREFRONT_STRICT_ORDER_TRANSITIONS", False)


def restock_on_cancel() -> bool:
    """Return item quantities to stock when an order is cancelled."""
    return _flag("STOREFRONT_RESTOCK_ON_CANCEL", True)


def conceal_foreign_orders() -> bool:
    """Answer 404 instead of 403 when a customer asks for someone else's order."""
    return _flag("STOREFRONT_CONCEAL_FOREIGN_ORDERS", False)


def identity_provider_secret() -> str | None:
    """Shared secret expected from the identity provider. Unset refuses every sign-in."""
    value = os.getenv("STOREFRONT_IDENTITY_SECRET", "").strip()
    return value or None
