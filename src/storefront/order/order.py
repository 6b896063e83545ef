"""Order aggregate (CQRS): one placed order with its lines, totals and tracking log.

Orders are created exactly once by order placement and afterwards change only
through the status state machine. Line items and the shipping address are
snapshots taken at placement time; the tracking history is append-only.

State Machine (7 states):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED → RETURNED
    CONFIRMED → SHIPPED (fast track)
    CANCELLED (from PENDING, CONFIRMED, PROCESSING)
    SHIPPED → RETURNED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.exceptions import TransitionError
from storefront.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(Enum):
    MPESA = "mpesa"
    CARD = "card"
    COD = "cod"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.RETURNED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# Allowed drift between stored totals, covering cent rounding
_TOTAL_EPSILON = 0.01


def allowed_transitions(status) -> set[OrderStatus]:
    """Statuses reachable in one step from ``status``."""
    return set(_VALID_TRANSITIONS.get(OrderStatus(status), set()))


def can_transition(current, target) -> bool:
    return OrderStatus(target) in allowed_transitions(current)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, and who to contact about it.

    Captured (already sanitized) at placement and never edited afterwards.
    """

    first_name = String(required=True, max_length=100, sanitize=False)
    last_name = String(required=True, max_length=100, sanitize=False)
    email = String(required=True, max_length=254, sanitize=False)
    phone = String(required=True, max_length=20, sanitize=False)
    street = String(required=True, max_length=255, sanitize=False)
    city = String(required=True, max_length=100, sanitize=False)
    county = String(required=True, max_length=100, sanitize=False)
    country = String(max_length=100, default="Kenya", sanitize=False)
    postal_code = String(max_length=20, sanitize=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A line of the order with the product name and price as they were at placement."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100, sanitize=False)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    size = String(required=True, max_length=20)
    line_total = Float(required=True, min_value=0.0)
    position = Integer(default=0)


@storefront.entity(part_of="Order")
class TrackingEntry:
    status = String(required=True, choices=OrderStatus)
    location = String(max_length=255)
    message = String(max_length=500)
    timestamp = DateTime(required=True)
    sequence = Integer(default=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=200, sanitize=False)
    customer_email = String(max_length=254, sanitize=False)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    subtotal = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    tracking_number = String(max_length=100)
    tracking_history = HasMany(TrackingEntry)
    notes = Text()
    admin_notes = Text()
    status_updated_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def subtotal_must_match_line_items(self):
        if not self.items:
            return
        expected = round(sum(item.line_total for item in self.items), 2)
        if abs(expected - (self.subtotal or 0.0)) > _TOTAL_EPSILON:
            raise ValidationError({"subtotal": ["Subtotal does not match the sum of the line items"]})

    @invariant.post
    def total_must_add_up(self):
        if not self.items:
            return
        expected = (self.subtotal or 0.0) + (self.shipping_cost or 0.0) + (self.tax or 0.0)
        if abs(expected - (self.total or 0.0)) > _TOTAL_EPSILON:
            raise ValidationError({"total": ["Total must equal subtotal plus shipping plus tax"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        items_data,
        shipping_address,
        totals,
        payment_method,
        notes=None,
    ):
        """Create a confirmed order from resolved, priced cart lines.

        Args:
            items_data: List of dicts with product_id, name, unit_price,
                        quantity, size, line_total.
            shipping_address: Dict of sanitized address fields.
            totals: ``PricedTotals`` computed by the pricing module.
        """
        now = datetime.now(UTC)
        address = ShippingAddress(**shipping_address)
        payment_status = PaymentStatus.PENDING if payment_method == PaymentMethod.COD.value else PaymentStatus.PAID

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            customer_name=address.full_name,
            customer_email=address.email,
            shipping_address=address,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping_cost,
            tax=totals.tax,
            total=totals.total,
            payment_method=payment_method,
            payment_status=payment_status.value,
            status=OrderStatus.CONFIRMED.value,
            notes=notes,
            status_updated_at=now,
            created_at=now,
            updated_at=now,
        )

        with atomic_change(order):
            for position, item in enumerate(items_data):
                order.add_items(OrderItem(position=position, **item))
            order.add_tracking_history(
                TrackingEntry(
                    status=OrderStatus.CONFIRMED.value,
                    message="Order received and confirmed",
                    timestamp=now,
                    sequence=0,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                customer_name=order.customer_name,
                customer_email=order.customer_email,
                items=json.dumps(items_data),
                shipping_address=json.dumps(address.to_dict()),
                subtotal=order.subtotal,
                shipping_cost=order.shipping_cost,
                tax=order.tax,
                total=order.total,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def ordered_items(self) -> list[OrderItem]:
        return sorted(self.items, key=lambda item: item.position or 0)

    @property
    def history(self) -> list[TrackingEntry]:
        """Tracking history, oldest first."""
        return sorted(self.tracking_history, key=lambda entry: entry.sequence or 0)

    def is_owned_by(self, user_id) -> bool:
        return str(self.customer_id) == str(user_id)

    # -------------------------------------------------------------------
    # Status lifecycle
    # -------------------------------------------------------------------
    def update_status(
        self,
        new_status,
        tracking_number=None,
        admin_notes=None,
        location=None,
        message=None,
    ):
        """Move the order to ``new_status`` and log it in the tracking history.

        Re-applying the current status skips the transition check, so an
        administrator can refresh the tracking number or notes without
        moving the order.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Invalid order status: {new_status}"]}) from None

        current = OrderStatus(self.status)
        if target != current and not can_transition(current, target):
            raise TransitionError({"status": [f"Cannot transition order from {current.value} to {target.value}"]})

        if target == OrderStatus.SHIPPED and not (tracking_number or self.tracking_number):
            raise ValidationError({"tracking_number": ["Tracking number is required when marking an order as shipped."]})

        if not message:
            message = f"Order status updated to {target.value}"
            if tracking_number:
                message += f". Tracking: {tracking_number}"

        now = datetime.now(UTC)
        next_sequence = max((entry.sequence or 0 for entry in self.tracking_history), default=-1) + 1

        with atomic_change(self):
            self.status = target.value
            self.status_updated_at = now
            self.updated_at = now
            if tracking_number:
                self.tracking_number = tracking_number
            if admin_notes:
                self.admin_notes = admin_notes
            self.add_tracking_history(
                TrackingEntry(
                    status=target.value,
                    location=location,
                    message=message,
                    timestamp=now,
                    sequence=next_sequence,
                )
            )

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_name=self.customer_name,
                customer_email=self.customer_email,
                previous_status=current.value,
                new_status=target.value,
                tracking_number=self.tracking_number,
                message=message,
                changed_at=now,
            )
        )
