"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. The wire format is camelCase; snake_case names
are accepted on input as well.
"""

import math
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(ApiModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    county: str | None = None
    country: str | None = None
    postal_code: str | None = None


class CartItemSchema(ApiModel):
    """One cart line as the client sends it.

    Every field is optional here; the domain rejects incomplete lines with
    a single, consistent message.
    """

    product_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("productId", "product", "product_id"),
    )
    name: str | None = None
    price: float | None = None
    quantity: int | None = None
    size: str | None = None


class ProductSizeSchema(ApiModel):
    size: str
    price: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(ApiModel):
    shipping_address: ShippingAddressSchema | None = None
    payment_method: str | None = None
    items: list[CartItemSchema] = Field(default_factory=list)
    subtotal: float | None = None
    shipping_cost: float = Field(default=0.0, ge=0)
    tax: float | None = None
    total_amount: float
    notes: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shippingAddress": {
                        "firstName": "Wanjiru",
                        "lastName": "Kamau",
                        "email": "wanjiru@example.com",
                        "phone": "0712345678",
                        "street": "12 Moi Avenue",
                        "city": "Nairobi",
                        "county": "Nairobi",
                        "country": "Kenya",
                    },
                    "paymentMethod": "mpesa",
                    "items": [
                        {"productId": "3f0c...", "name": "Kenya AA", "price": 1000.0, "quantity": 1, "size": "250g"}
                    ],
                    "subtotal": 1000.0,
                    "shippingCost": 200.0,
                    "tax": 160.0,
                    "totalAmount": 1360.0,
                }
            ]
        },
    )


class UpdateOrderStatusRequest(ApiModel):
    status: str
    tracking_number: str | None = None
    admin_notes: str | None = None
    location: str | None = None
    message: str | None = None


class ShippingCostRequest(ApiModel):
    country: str | None = None
    county: str | None = None


# ---------------------------------------------------------------------------
# Product Request Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(ApiModel):
    name: str
    description: str
    category: str | None = None
    sizes: list[ProductSizeSchema] = Field(default_factory=list)
    price: float | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    low_stock_threshold: int = Field(
        default=5,
        ge=0,
        validation_alias=AliasChoices("lowStockThreshold", "lowStockAlert", "low_stock_threshold"),
    )


class AdjustStockRequest(ApiModel):
    stock: int
    low_stock_threshold: int | None = Field(
        default=None,
        validation_alias=AliasChoices("lowStockThreshold", "lowStockAlert", "low_stock_threshold"),
    )


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(ApiModel):
    id: str
    product_id: str
    name: str
    unit_price: float
    quantity: int
    size: str
    line_total: float


class TrackingEntryResponse(ApiModel):
    status: str
    location: str | None = None
    message: str | None = None
    timestamp: datetime


class OrderResponse(ApiModel):
    id: str
    order_number: str
    customer_id: str
    items: list[OrderItemResponse]
    shipping_address: ShippingAddressSchema
    subtotal: float
    shipping_cost: float
    tax: float
    total_amount: float
    payment_method: str
    payment_status: str
    status: str
    tracking_number: str | None = None
    tracking_history: list[TrackingEntryResponse]
    notes: str | None = None
    admin_notes: str | None = None
    status_updated_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    size=item.size,
                    line_total=item.line_total,
                )
                for item in order.ordered_items
            ],
            shipping_address=ShippingAddressSchema(**order.shipping_address.to_dict()),
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            tax=order.tax,
            total_amount=order.total,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            status=order.status,
            tracking_number=order.tracking_number,
            tracking_history=[
                TrackingEntryResponse(
                    status=entry.status,
                    location=entry.location,
                    message=entry.message,
                    timestamp=entry.timestamp,
                )
                for entry in order.history
            ],
            notes=order.notes,
            admin_notes=order.admin_notes,
            status_updated_at=order.status_updated_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class ProductResponse(ApiModel):
    id: str
    name: str
    description: str
    category: str | None = None
    sizes: list[ProductSizeSchema]
    price: float | None = None
    stock: int
    low_stock_threshold: int
    in_stock: bool
    is_active: bool

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            category=product.category,
            sizes=[ProductSizeSchema(size=s.size, price=s.price) for s in product.sizes],
            price=product.price,
            stock=product.stock,
            low_stock_threshold=product.low_stock_threshold,
            in_stock=product.in_stock,
            is_active=product.is_active,
        )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def of(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class OrderEnvelope(ApiModel):
    success: bool = True
    message: str | None = None
    data: OrderResponse


class OrderListEnvelope(ApiModel):
    success: bool = True
    data: list[OrderResponse]
    pagination: Pagination


class ShippingCostData(ApiModel):
    shipping_cost: float
    currency: str


class ShippingCostEnvelope(ApiModel):
    success: bool = True
    data: ShippingCostData


class ProductEnvelope(ApiModel):
    success: bool = True
    message: str | None = None
    data: ProductResponse


class ProductListEnvelope(ApiModel):
    success: bool = True
    data: list[ProductResponse]
