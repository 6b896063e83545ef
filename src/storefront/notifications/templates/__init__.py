"""Template registry: maps notification kinds to template classes.

Every template renders a context dict to ``{"subject", "body"}``.
"""

from storefront.notifications.templates.low_stock_alert import LowStockAlertTemplate
from storefront.notifications.templates.order_confirmation import OrderConfirmationTemplate
from storefront.notifications.templates.order_status import OrderStatusTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    OrderConfirmationTemplate.notification_type: OrderConfirmationTemplate,
    OrderStatusTemplate.notification_type: OrderStatusTemplate,
    LowStockAlertTemplate.notification_type: LowStockAlertTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
