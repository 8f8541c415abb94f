"""Application tests for role-scoped order reads."""

import pytest
from storefront.errors import Forbidden, InvalidRequest, NotAuthenticated, NotFound
from storefront.order.queries import get_order, has_purchased, list_orders


@pytest.fixture()
def orders(customer, other_customer, product, make_address, put_in_cart, checkout):
    put_in_cart(customer, product, 1)
    mine = checkout(customer, make_address(customer))
    put_in_cart(other_customer, product, 1)
    theirs = checkout(other_customer, make_address(other_customer))
    return {"mine": mine, "theirs": theirs}


class TestListOrders:
    def test_customer_sees_only_own(self, customer, orders):
        views = list_orders(customer)
        assert [str(v.order.id) for v in views] == [orders["mine"]]

    def test_manager_sees_all_with_owner(self, manager, orders, customer, other_customer):
        views = list_orders(manager)
        assert {str(v.order.id) for v in views} == set(orders.values())
        assert {str(v.owner.id) for v in views} == {customer, other_customer}

    def test_admin_sees_all(self, admin, orders):
        assert len(list_orders(admin)) == 2

    def test_unauthenticated(self):
        with pytest.raises(NotAuthenticated):
            list_orders(None)


class TestGetOrder:
    def test_owner_gets_order_with_address(self, customer, orders):
        view = get_order(customer, orders["mine"])
        assert str(view.order.id) == orders["mine"]
        assert view.address.street == "1 Main St"

    def test_staff_gets_any_order(self, manager, orders):
        assert str(get_order(manager, orders["theirs"]).order.id) == orders["theirs"]

    def test_foreign_order_is_forbidden(self, customer, orders):
        with pytest.raises(Forbidden):
            get_order(customer, orders["theirs"])

    def test_foreign_order_can_be_concealed(self, monkeypatch, customer, orders):
        monkeypatch.setenv("STOREFRONT_CONCEAL_FOREIGN_ORDERS", "true")
        with pytest.raises(NotFound):
            get_order(customer, orders["theirs"])

    def test_unknown_order(self, customer):
        with pytest.raises(NotFound):
            get_order(customer, "missing")


class TestHasPurchased:
    def test_false_until_delivered(self, customer, product, orders):
        assert has_purchased(customer, product) is False

    def test_true_once_delivered(self, customer, product, delivered_order):
        assert has_purchased(customer, product) is True

    def test_requires_product_id(self, customer):
        with pytest.raises(InvalidRequest):
            has_purchased(customer, None)
