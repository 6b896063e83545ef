"""Application tests for UpdateOrderStatus."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.exceptions import NotFoundError, TransitionError
from storefront.order.order import Order
from storefront.order.status import UpdateOrderStatus


@pytest.fixture()
def order_id(create_product, order_command):
    product = create_product()
    return current_domain.process(order_command([(product, 1, "250g", 500.0)], 780.0), asynchronous=False)


def _update(order_id, status, **kwargs):
    return current_domain.process(UpdateOrderStatus(order_id=order_id, status=status, **kwargs), asynchronous=False)


def _load(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestUpdateOrderStatus:
    def test_full_lifecycle(self, order_id):
        _update(order_id, "processing", location="Nairobi roastery")
        _update(order_id, "shipped", tracking_number="TRK-1001")
        _update(order_id, "delivered")
        _update(order_id, "returned", admin_notes="Bag arrived torn")

        order = _load(order_id)
        assert order.status == "returned"
        assert order.tracking_number == "TRK-1001"
        assert order.admin_notes == "Bag arrived torn"
        assert [entry.status for entry in order.history] == [
            "confirmed",
            "processing",
            "shipped",
            "delivered",
            "returned",
        ]
        assert order.history[1].location == "Nairobi roastery"
        assert order.history[2].message == "Order status updated to shipped. Tracking: TRK-1001"

    def test_invalid_transition_is_not_persisted(self, order_id):
        _update(order_id, "cancelled")

        with pytest.raises(TransitionError):
            _update(order_id, "processing")

        order = _load(order_id)
        assert order.status == "cancelled"
        assert len(order.history) == 2

    def test_shipping_requires_tracking_number(self, order_id):
        with pytest.raises(ValidationError):
            _update(order_id, "shipped")
        assert _load(order_id).status == "confirmed"

    def test_missing_order(self):
        with pytest.raises(NotFoundError):
            _update("00000000-0000-4000-8000-000000000000", "processing")

    def test_status_updated_at_moves_forward(self, order_id):
        placed = _load(order_id).status_updated_at
        _update(order_id, "processing")
        assert _load(order_id).status_updated_at >= placed
