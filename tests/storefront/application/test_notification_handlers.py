"""Tests for the post-commit notification handlers.

Handlers are invoked directly with constructed events; email goes to the
in-memory fake channel.
"""

import json
from datetime import UTC, datetime

import pytest

from storefront.notifications.handlers import (
    OrderNotificationHandler,
    StockAlertHandler,
    deliver_email,
)
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.product.events import LowStockDetected
from storefront.shared.settings import StoreSettings


def _order_placed(email="wanjiru@example.com"):
    return OrderPlaced(
        order_id="ord-001",
        order_number="ORD-12345678-ABCDEF12",
        customer_id="cust-001",
        customer_name="Wanjiru Kamau",
        customer_email=email,
        items=json.dumps(
            [
                {
                    "product_id": "prod-1",
                    "name": "Kenya AA",
                    "unit_price": 500.0,
                    "quantity": 2,
                    "size": "250g",
                    "line_total": 1000.0,
                }
            ]
        ),
        shipping_address=json.dumps(
            {
                "first_name": "Wanjiru",
                "email": email,
                "street": "12 Moi Avenue",
                "city": "Nairobi",
                "county": "Nairobi",
                "country": "Kenya",
            }
        ),
        subtotal=1000.0,
        shipping_cost=200.0,
        tax=160.0,
        total=1360.0,
        payment_method="mpesa",
        payment_status="paid",
        placed_at=datetime(2026, 3, 14, 9, 30, tzinfo=UTC),
    )


def _status_changed(new_status="shipped", tracking_number="TRK-1"):
    return OrderStatusChanged(
        order_id="ord-001",
        order_number="ORD-12345678-ABCDEF12",
        customer_name="Wanjiru Kamau",
        customer_email="wanjiru@example.com",
        previous_status="confirmed",
        new_status=new_status,
        tracking_number=tracking_number,
        message=f"Order status updated to {new_status}",
        changed_at=datetime.now(UTC),
    )


class TestOrderConfirmationEmail:
    def test_sends_confirmation_with_invoice(self, email_channel):
        OrderNotificationHandler().on_order_placed(_order_placed())

        assert len(email_channel.sent_emails) == 1
        email = email_channel.sent_emails[0]
        assert email["to"] == "wanjiru@example.com"
        assert email["subject"] == "Order Confirmation - #ORD-12345678-ABCDEF12"
        assert "Hi Wanjiru" in email["body"]
        assert "INVOICE #ORD-12345678-ABCDEF12" in email["body"]
        assert "Kenya AA (250g) x2" in email["body"]
        assert "Total:    KES 1,360.00" in email["body"]

    def test_delivery_failure_is_swallowed(self, email_channel):
        email_channel.configure(should_raise=True)
        OrderNotificationHandler().on_order_placed(_order_placed())
        assert email_channel.sent_emails == []

    def test_failed_status_is_swallowed(self, email_channel):
        email_channel.configure(should_succeed=False)
        OrderNotificationHandler().on_order_placed(_order_placed())
        assert email_channel.sent_emails == []


class TestOrderStatusEmail:
    def test_shipped_subject(self, email_channel):
        OrderNotificationHandler().on_order_status_changed(_status_changed())

        email = email_channel.sent_emails[0]
        assert email["subject"] == "Order Shipped - #ORD-12345678-ABCDEF12"
        assert "Tracking number: TRK-1" in email["body"]

    def test_other_statuses_are_updates(self, email_channel):
        OrderNotificationHandler().on_order_status_changed(_status_changed("processing", None))
        assert email_channel.sent_emails[0]["subject"] == "Order Update - #ORD-12345678-ABCDEF12"


class TestLowStockAlert:
    def test_alert_goes_to_admin_address(self, email_channel, monkeypatch):
        monkeypatch.setenv("ADMIN_ALERT_EMAIL", "stock@rerendetcoffee.com")
        StockAlertHandler().on_low_stock_detected(
            LowStockDetected(
                product_id="prod-1",
                name="Kenya AA",
                current_stock=3,
                low_stock_threshold=5,
                detected_at=datetime.now(UTC),
            )
        )

        email = email_channel.sent_emails[0]
        assert email["to"] == "stock@rerendetcoffee.com"
        assert email["subject"] == "[Low Stock] Kenya AA"
        assert "Current Stock: 3" in email["body"]


class TestDeliverEmail:
    def test_no_recipient_sends_nothing(self, email_channel):
        assert deliver_email("order_status", None, {}, StoreSettings.from_env({})) is None
        assert email_channel.sent_emails == []

    def test_unknown_template_is_logged_not_raised(self, email_channel):
        assert deliver_email("newsletter", "a@example.com", {}, StoreSettings.from_env({})) is None

    @pytest.mark.parametrize("notification_type", ["order_confirmation", "order_status", "low_stock_alert"])
    def test_every_template_renders_with_empty_context(self, email_channel, notification_type):
        result = deliver_email(notification_type, "a@example.com", {}, StoreSettings.from_env({}))
        assert result["status"] == "sent"
