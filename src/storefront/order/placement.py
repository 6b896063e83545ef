"""Order placement: command and handler.

Placement is one unit of work: the cart is validated, every product is loaded
and checked against live stock, prices are recomputed from the catalogue and
compared with what the client showed the customer, and only then are the
order and the stock decrements written. Everything that can reject the order
is checked before the first write.
"""

import json
import threading

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import AuthorizationError, PriceIntegrityError, StockError
from storefront.order.numbering import generate_order_number
from storefront.order.order import Order, PaymentMethod
from storefront.order.pricing import DEFAULT_TAX_RATE, calculate_totals, line_total, within_tolerance
from storefront.product.product import Product
from storefront.shared.sanitize import sanitize_email, sanitize_mapping, sanitize_phone
from storefront.shared.settings import is_production

logger = structlog.get_logger(__name__)

ADMIN_ROLES = frozenset({"admin", "super-admin"})
ORDER_NUMBER_ATTEMPTS = 5
ADMIN_ORDER_MESSAGE = "Administrators are not allowed to place orders. Please use a regular customer account."

_ADDRESS_FIELDS = ("first_name", "last_name", "email", "phone", "street", "city", "county", "country", "postal_code")
_REQUIRED_ADDRESS_FIELDS = ("first_name", "last_name", "street", "city", "county")


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    customer_role = String(max_length=50, default="customer")
    shipping_address = Text(required=True, sanitize=False)  # JSON: address dict
    payment_method = String(required=True, max_length=20)
    items = Text(required=True, sanitize=False)  # JSON: list of cart line dicts
    subtotal = Float()
    shipping_cost = Float(default=0.0)
    tax = Float()
    total_amount = Float(required=True)
    notes = Text()
    tax_rate = Float(default=DEFAULT_TAX_RATE)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_cart_lines(items) -> list[dict]:
    """Check the shape of every cart line and normalise the product reference.

    Returns the lines as dicts with ``product_id``, ``name``, ``quantity``
    and ``size``. The client's price must be present and positive but is
    otherwise discarded.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["Order items are required"]})

    lines = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError({"items": ["Invalid item data. All item fields are required."]})

        product_id = item.get("product_id") or item.get("product")
        price = item.get("price")
        quantity = item.get("quantity")
        if (
            not product_id
            or not item.get("name")
            or not isinstance(price, (int, float))
            or isinstance(price, bool)
            or price <= 0
            or not _positive_int(quantity)
            or not item.get("size")
        ):
            raise ValidationError({"items": ["Invalid item data. All item fields are required."]})

        lines.append(
            {
                "product_id": str(product_id),
                "name": item["name"],
                "quantity": quantity,
                "size": item["size"],
            }
        )
    return lines


def sanitize_shipping_address(address) -> dict:
    """Strip markup from the address and normalise email and phone."""
    if not isinstance(address, dict):
        raise ValidationError({"shipping_address": ["Shipping address and payment method are required"]})

    sanitized = sanitize_mapping({key: address.get(key) for key in _ADDRESS_FIELDS if address.get(key) is not None})
    sanitized["email"] = sanitize_email(address.get("email"))
    sanitized["phone"] = sanitize_phone(address.get("phone"))

    if not sanitized["email"] or not sanitized["phone"]:
        raise ValidationError({"shipping_address": ["Valid email and phone number are required"]})

    missing = [field for field in _REQUIRED_ADDRESS_FIELDS if not sanitized.get(field)]
    if missing:
        raise ValidationError({"shipping_address": [f"Missing shipping address fields: {', '.join(missing)}"]})

    sanitized["country"] = sanitized.get("country") or "Kenya"
    return sanitized


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if (command.customer_role or "").lower() in ADMIN_ROLES:
            logger.warning("Admin attempted to place an order", customer_id=str(command.customer_id))
            raise AuthorizationError(ADMIN_ORDER_MESSAGE)

        lines = validate_cart_lines(_load(command.items))

        payment_methods = {method.value for method in PaymentMethod}
        if command.payment_method not in payment_methods:
            raise ValidationError({"payment_method": [f"Invalid payment method: {command.payment_method}"]})

        address = sanitize_shipping_address(_load(command.shipping_address))

        # Quantities for the same product are taken from stock together
        requested: dict[str, int] = {}
        for line in lines:
            requested[line["product_id"]] = requested.get(line["product_id"], 0) + line["quantity"]

        product_repo = current_domain.repository_for(Product)
        products: dict[str, Product] = {}
        for line in lines:
            product_id = line["product_id"]
            if product_id in products:
                continue

            try:
                product = product_repo.get(product_id)
            except ObjectNotFoundError:
                product = None
            if product is None or not product.is_active:
                raise ValidationError({"items": [f"Product not found: {line['name']}"]})

            if requested[product_id] > product.stock:
                logger.warning(
                    "Insufficient stock",
                    product_id=product_id,
                    available=product.stock,
                    requested=requested[product_id],
                )
                raise StockError(
                    {
                        "items": [
                            f"Insufficient stock for {product.name}. "
                            f"Available: {product.stock}, Requested: {requested[product_id]}"
                        ]
                    }
                )
            products[product_id] = product

        items_data = []
        for line in lines:
            product = products[line["product_id"]]
            unit_price = product.price_for(line["size"])
            if unit_price is None:
                raise ValidationError({"items": [f"No price available for {product.name} ({line['size']})"]})

            items_data.append(
                {
                    "product_id": line["product_id"],
                    "name": product.name,
                    "unit_price": unit_price,
                    "quantity": line["quantity"],
                    "size": line["size"],
                    "line_total": line_total(unit_price, line["quantity"]),
                }
            )

        totals = calculate_totals(
            items_data,
            shipping_cost=command.shipping_cost or 0.0,
            tax_rate=DEFAULT_TAX_RATE if command.tax_rate is None else command.tax_rate,
        )
        if not within_tolerance(totals.total, command.total_amount):
            logger.warning(
                "Order total mismatch",
                customer_id=str(command.customer_id),
                calculated_total=totals.total,
                submitted_total=command.total_amount,
            )
            errors = {"total_amount": ["Order amount validation failed. Please refresh your cart and try again."]}
            if not is_production():
                errors["details"] = [
                    f"calculated subtotal={totals.subtotal} tax={totals.tax} total={totals.total}; "
                    f"submitted subtotal={command.subtotal} tax={command.tax} total={command.total_amount}"
                ]
            raise PriceIntegrityError(errors)

        order_repo = current_domain.repository_for(Order)
        order = Order.place(
            order_number=self._unique_order_number(order_repo),
            customer_id=command.customer_id,
            items_data=items_data,
            shipping_address=address,
            totals=totals,
            payment_method=command.payment_method,
            notes=command.notes,
        )

        decrements = [products[product_id].decrement_stock(quantity) for product_id, quantity in requested.items()]

        order_repo.add(order)
        for decrement in decrements:
            try:
                product_repo.add(products[decrement.product_id])
            except ExpectedVersionError:
                product = products[decrement.product_id]
                raise StockError(
                    {"items": [f"Stock for {product.name} changed while the order was being placed. Please try again."]}
                ) from None

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total=order.total,
            items=len(items_data),
        )
        return str(order.id)

    @staticmethod
    def _unique_order_number(order_repo) -> str:
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number()
            if not order_repo.order_number_taken(candidate):
                return candidate
        raise RuntimeError("Could not generate a unique order number")


# The memory provider gives each unit of work a private copy of the store and
# commits by swapping the copy in, so overlapping placements on it would
# silently drop one another's writes.
_SERIALIZED_PROVIDERS = ("memory",)
_placement_lock = threading.Lock()


def _needs_serializing() -> bool:
    provider = current_domain.providers[Product.meta_.provider]
    return provider.conn_info["provider"] in _SERIALIZED_PROVIDERS


def submit_order(command: PlaceOrder) -> str:
    """Process a ``PlaceOrder`` command and return the new order's id.

    Placements run one at a time on providers without real transactions. A
    version conflict that survives Protean's retries is reported as a stock
    error so the customer can try again.
    """
    try:
        if _needs_serializing():
            with _placement_lock:
                return current_domain.process(command, asynchronous=False)
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError:
        raise StockError(
            {"items": ["Stock changed while the order was being placed. Please try again."]}
        ) from None
