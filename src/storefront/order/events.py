"""Domain events for the Order aggregate.

Events are published after the placing or updating unit of work commits and
feed the notification handlers. They carry everything an email needs so the
handlers never have to reload the order.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer's cart was accepted, priced and persisted as an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    customer_name = String(sanitize=False)
    customer_email = String(sanitize=False)
    items = Text(required=True, sanitize=False)  # JSON: list of line dicts
    shipping_address = Text(required=True, sanitize=False)  # JSON: address dict
    subtotal = Float(required=True)
    shipping_cost = Float()
    tax = Float()
    total = Float(required=True)
    payment_method = String(required=True)
    payment_status = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved an order to a new status (or refreshed it)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_name = String(sanitize=False)
    customer_email = String(sanitize=False)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    message = String()
    changed_at = DateTime(required=True)
