import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context and start from empty stores."""
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _default_policies(monkeypatch):
    for name in (
        "STOREFRONT_STRICT_ORDER_TRANSITIONS",
        "STOREFRONT_RESTOCK_ON_CANCEL",
        "STOREFRONT_CONCEAL_FOREIGN_ORDERS",
        "STOREFRONT_IDENTITY_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
def _register_user(email, role="CUSTOMER", name=None):
    """Sign a user in through the identity upsert and give them ``role``."""
    from protean import current_domain
    from storefront.identity.authentication import UpsertIdentity
    from storefront.identity.user import User

    result = current_domain.process(
        UpsertIdentity(
            email=email,
            name=name or email.split("@")[0].title(),
            provider="test",
            provider_account_id=email,
        ),
        asynchronous=False,
    )
    if role != "CUSTOMER":
        repo = current_domain.repository_for(User)
        user = repo.get(result["user_id"])
        user.assign_role(role, assigned_by="test-setup")
        repo.add(user)
    return result["user_id"]


def _create_product(actor_id, name="Widget", price=10.0, stock=5, category="OTHER", description=None):
    from protean import current_domain
    from storefront.catalogue.management import CreateProduct

    return current_domain.process(
        CreateProduct(
            actor_id=actor_id,
            name=name,
            description=description or f"A {name.lower()}",
            price=price,
            stock=stock,
            category=category,
        ),
        asynchronous=False,
    )


def _add_address(user_id, street="1 Main St", is_default=False):
    from protean import current_domain
    from storefront.identity.addresses import AddAddress

    return current_domain.process(
        AddAddress(
            user_id=user_id,
            street=street,
            city="Springfield",
            state="IL",
            postal_code="62701",
            country="US",
            is_default=is_default,
        ),
        asynchronous=False,
    )


def _add_to_cart(user_id, product_id, quantity=1):
    from protean import current_domain
    from storefront.cart.items import AddToCart

    return current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def _change_status(actor_id, order_id, status):
    from protean import current_domain
    from storefront.order.status import ChangeOrderStatus

    return current_domain.process(
        ChangeOrderStatus(actor_id=actor_id, order_id=order_id, status=status),
        asynchronous=False,
    )


@pytest.fixture()
def customer():
    return _register_user("carol@example.com")


@pytest.fixture()
def other_customer():
    return _register_user("dave@example.com")


@pytest.fixture()
def manager():
    return _register_user("maria@example.com", role="MANAGER")


@pytest.fixture()
def admin():
    return _register_user("adam@example.com", role="ADMIN")


@pytest.fixture()
def product(manager):
    return _create_product(manager, name="Desk Lamp", price=19.99, stock=5, category="ELECTRONICS")


@pytest.fixture()
def address(customer):
    return _add_address(customer)


@pytest.fixture()
def register():
    return _register_user


@pytest.fixture()
def make_product():
    return _create_product


@pytest.fixture()
def make_address():
    return _add_address


@pytest.fixture()
def put_in_cart():
    return _add_to_cart


@pytest.fixture()
def set_status():
    return _change_status


@pytest.fixture()
def checkout():
    from storefront.order.checkout import place_order

    return place_order


@pytest.fixture()
def delivered_order(customer, manager, product, address):
    """An order of one Desk Lamp that has reached the customer."""
    from storefront.order.checkout import place_order

    _add_to_cart(customer, product, 1)
    order_id = place_order(customer, address)
    _change_status(manager, order_id, "DELIVERED")
    return order_id
