"""Tests for the Order aggregate: placement snapshot and status changes."""

import pytest
from storefront.errors import EmptyCart, InvalidStatus, InvalidTransition
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import TERMINAL_STATES, Order, OrderStatus, parse_status


def _lines():
    return [
        {"product_id": "prod-1", "product_name": "Desk Lamp", "quantity": 2, "price": 19.99},
        {"product_id": "prod-2", "product_name": "Mug", "quantity": 3, "price": 0.1},
    ]


def _order():
    return Order.place(user_id="user-1", address_id="addr-1", lines=_lines())


class TestPlacement:
    def test_new_order_is_pending(self):
        assert _order().status == OrderStatus.PENDING.value

    def test_items_snapshot_prices(self):
        order = _order()
        assert [(i.product_name, i.quantity, i.price) for i in order.items] == [
            ("Desk Lamp", 2, 19.99),
            ("Mug", 3, 0.1),
        ]

    def test_total_uses_fixed_point(self):
        # 2 x 19.99 + 3 x 0.10 would drift with binary floats
        assert _order().total == 40.28

    def test_empty_order_rejected(self):
        with pytest.raises(EmptyCart):
            Order.place(user_id="user-1", address_id="addr-1", lines=[])

    def test_placement_raises_event(self):
        order = _order()
        event = next(e for e in order._events if isinstance(e, OrderPlaced))
        assert event.item_count == 2
        assert event.total == 40.28

    def test_contains_product(self):
        order = _order()
        assert order.contains_product("prod-2")
        assert not order.contains_product("prod-9")

    def test_is_owned_by(self):
        order = _order()
        assert order.is_owned_by("user-1")
        assert not order.is_owned_by("user-2")


class TestStatusParsing:
    def test_known_value(self):
        assert parse_status("SHIPPED") is OrderStatus.SHIPPED

    @pytest.mark.parametrize("value", ["shipped", "LOST", "", None])
    def test_unknown_value(self, value):
        with pytest.raises(InvalidStatus):
            parse_status(value)

    def test_terminal_states(self):
        assert TERMINAL_STATES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


class TestPermissiveTransitions:
    def test_any_status_from_any_other(self):
        order = _order()
        order.change_status(OrderStatus.DELIVERED)
        order.change_status(OrderStatus.PENDING)
        assert order.status == "PENDING"

    def test_change_returns_previous_status(self):
        order = _order()
        assert order.change_status("PROCESSING") is OrderStatus.PENDING

    def test_change_bumps_updated_at_only(self):
        order = _order()
        created_at = order.created_at
        before = order.updated_at
        order.change_status(OrderStatus.SHIPPED)
        assert order.updated_at >= before
        assert order.created_at == created_at

    def test_change_raises_event(self):
        order = _order()
        order.change_status(OrderStatus.CANCELLED, changed_by="mgr-1")
        event = next(e for e in order._events if isinstance(e, OrderStatusChanged))
        assert event.previous_status == "PENDING"
        assert event.new_status == "CANCELLED"

    def test_status_change_never_touches_prices(self):
        order = _order()
        order.change_status(OrderStatus.DELIVERED)
        assert order.total == 40.28
        assert [i.price for i in order.items] == [19.99, 0.1]


class TestStrictTransitions:
    @pytest.mark.parametrize(
        "path",
        [
            ["PROCESSING", "SHIPPED", "DELIVERED"],
            ["CANCELLED"],
            ["PROCESSING", "CANCELLED"],
            ["PROCESSING", "SHIPPED", "CANCELLED"],
        ],
    )
    def test_legal_paths(self, path):
        order = _order()
        for status in path:
            order.change_status(status, strict=True)
        assert order.status == path[-1]

    def test_skipping_a_step_rejected(self):
        order = _order()
        with pytest.raises(InvalidTransition):
            order.change_status(OrderStatus.SHIPPED, strict=True)
        assert order.status == "PENDING"

    @pytest.mark.parametrize("terminal", ["DELIVERED", "CANCELLED"])
    def test_terminal_states_are_final(self, terminal):
        order = _order()
        order.change_status(terminal)
        with pytest.raises(InvalidTransition):
            order.change_status(OrderStatus.PENDING, strict=True)
