"""Product aggregate (CQRS): catalogue entry carrying per-size prices and stock.

Products are maintained by admin tooling and read by order placement, which
is the only path that lowers stock. Stock never goes negative and the
``in_stock`` flag always mirrors ``stock > 0``. Products are deactivated,
never deleted.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text

from storefront.domain import storefront
from storefront.exceptions import StockError
from storefront.shared.sanitize import sanitize_text
from storefront.product.events import LowStockDetected, ProductDeactivated, StockAdjusted


class ProductCategory(Enum):
    COFFEE_BEANS = "coffee-beans"
    BREWING_EQUIPMENT = "brewing-equipment"
    ACCESSORIES = "accessories"
    MERCHANDISE = "merchandise"


class SizeOption(Enum):
    SMALL = "250g"
    MEDIUM = "500g"
    LARGE = "1000g"


class StockDecrement(NamedTuple):
    """Outcome of taking stock for one product during order placement."""

    product_id: str
    quantity_reserved: int
    stock_before_decrement: int

    @property
    def stock_after_decrement(self) -> int:
        return self.stock_before_decrement - self.quantity_reserved


@storefront.entity(part_of="Product")
class ProductSize:
    """A purchasable size of a product with its own price."""

    size = String(required=True, choices=SizeOption)
    price = Float(required=True, min_value=0.0)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=100, sanitize=False)
    description = Text(required=True, sanitize=False)
    category = String(
        choices=ProductCategory,
        default=ProductCategory.COFFEE_BEANS.value,
    )
    sizes = HasMany(ProductSize)
    price = Float(min_value=0.0)  # Flat price, used when no size matches
    stock = Integer(default=0, min_value=0)
    low_stock_threshold = Integer(default=5, min_value=0)
    in_stock = Boolean(default=False)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def in_stock_flag_must_mirror_stock(self):
        if bool(self.in_stock) != ((self.stock or 0) > 0):
            raise ValidationError({"in_stock": ["In-stock flag does not match stock level"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        description,
        sizes=None,
        category=ProductCategory.COFFEE_BEANS.value,
        price=None,
        stock=0,
        low_stock_threshold=5,
    ):
        """Create a product.

        Args:
            sizes: List of dicts with ``size`` and ``price``.
        """
        now = datetime.now(UTC)
        product = cls(
            name=sanitize_text(name),
            description=sanitize_text(description),
            category=category,
            price=price,
            stock=stock,
            low_stock_threshold=low_stock_threshold,
            in_stock=stock > 0,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        for size_data in sizes or []:
            product.add_sizes(ProductSize(size=size_data["size"], price=size_data["price"]))
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def price_for(self, size):
        """Authoritative unit price for a size, falling back to the flat price.

        Returns None when the product has neither.
        """
        match = next((s for s in self.sizes if s.size == size), None)
        if match is not None:
            return match.price
        return self.price

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def decrement_stock(self, quantity) -> StockDecrement:
        """Take ``quantity`` units out of stock for a placed order."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > self.stock:
            raise StockError(
                {"stock": [f"Insufficient stock for {self.name}. Available: {self.stock}, Requested: {quantity}"]}
            )

        record = StockDecrement(
            product_id=str(self.id),
            quantity_reserved=quantity,
            stock_before_decrement=self.stock,
        )
        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock = record.stock_after_decrement
            self.in_stock = self.stock > 0
            self.updated_at = now

        if self.is_low_stock:
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    name=self.name,
                    current_stock=self.stock,
                    low_stock_threshold=self.low_stock_threshold,
                    detected_at=now,
                )
            )
        return record

    def adjust_stock(self, new_stock, low_stock_threshold=None):
        """Set an absolute stock level (restock or stock count correction)."""
        if new_stock is None or new_stock < 0:
            raise ValidationError({"stock": ["Invalid stock quantity"]})

        previous = self.stock
        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock = new_stock
            self.in_stock = new_stock > 0
            if low_stock_threshold is not None:
                self.low_stock_threshold = low_stock_threshold
            self.updated_at = now

        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                previous_stock=previous,
                new_stock=new_stock,
                adjusted_at=now,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Product is already inactive"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))
