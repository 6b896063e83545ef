"""Post-commit notification handlers.

Order and stock events are delivered here only after the unit of work that
raised them has committed. Sending mail is best effort: every failure is
logged and swallowed so it can never undo or fail the business operation.
"""

import json

import structlog
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.notifications.channel import get_email_channel
from storefront.notifications.templates import get_template
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import Order
from storefront.product.events import LowStockDetected
from storefront.product.product import Product
from storefront.shared.settings import StoreSettings

logger = structlog.get_logger(__name__)


def deliver_email(notification_type: str, to: str | None, context: dict, settings: StoreSettings) -> dict | None:
    """Render a template and hand it to the email channel.

    Returns the channel's result, or None when nothing was sent.
    """
    if not to:
        logger.warning("Notification skipped, no recipient", notification_type=notification_type)
        return None

    try:
        content = get_template(notification_type).render({**context, "store_name": settings.store_name})
        result = get_email_channel().send(
            to=to,
            subject=content["subject"],
            body=content["body"],
            sender=settings.store_email,
        )
    except Exception as exc:
        logger.error(
            "Notification delivery failed",
            notification_type=notification_type,
            recipient=to,
            error=str(exc),
            exc_info=True,
        )
        return None

    if result.get("status") == "sent":
        logger.info("Notification sent", notification_type=notification_type, message_id=result.get("message_id"))
    else:
        logger.warning(
            "Notification not delivered",
            notification_type=notification_type,
            recipient=to,
            error=result.get("error"),
        )
    return result


@storefront.event_handler(part_of=Order)
class OrderNotificationHandler:
    """Emails the customer when an order is placed or changes status."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        settings = StoreSettings.from_env()
        address = json.loads(event.shipping_address) if event.shipping_address else {}
        items = json.loads(event.items) if event.items else []

        deliver_email(
            "order_confirmation",
            event.customer_email or address.get("email"),
            {
                "order_number": event.order_number,
                "first_name": address.get("first_name"),
                "placed_on": event.placed_at.strftime("%B %d, %Y") if event.placed_at else "",
                "items": items,
                "shipping_address": address,
                "subtotal": event.subtotal,
                "shipping_cost": event.shipping_cost,
                "tax": event.tax,
                "total": event.total,
                "currency": settings.currency,
                "payment_method": event.payment_method,
                "payment_status": event.payment_status,
                "dashboard_url": f"{settings.frontend_url}/account",
            },
            settings,
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        settings = StoreSettings.from_env()
        first_name = (event.customer_name or "").split(" ")[0]

        deliver_email(
            "order_status",
            event.customer_email,
            {
                "order_number": event.order_number,
                "first_name": first_name,
                "status": event.new_status,
                "tracking_number": event.tracking_number,
                "message": event.message,
            },
            settings,
        )


@storefront.event_handler(part_of=Product)
class StockAlertHandler:
    """Alerts the store admin when a product runs low."""

    @handle(LowStockDetected)
    def on_low_stock_detected(self, event: LowStockDetected) -> None:
        settings = StoreSettings.from_env()

        deliver_email(
            "low_stock_alert",
            settings.admin_alert_email or settings.store_email,
            {
                "product_id": str(event.product_id),
                "name": event.name,
                "current_stock": event.current_stock,
                "low_stock_threshold": event.low_stock_threshold,
            },
            settings,
        )
