"""FastAPI routes for the storefront: orders and admin product management."""

import json
from datetime import UTC, date, datetime, time
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AdjustStockRequest,
    CreateProductRequest,
    OrderEnvelope,
    OrderListEnvelope,
    OrderResponse,
    Pagination,
    PlaceOrderRequest,
    ProductEnvelope,
    ProductListEnvelope,
    ProductResponse,
    ShippingCostData,
    ShippingCostEnvelope,
    ShippingCostRequest,
    UpdateOrderStatusRequest,
)
from storefront.auth.actor import Actor
from storefront.auth.dependencies import current_actor, require_admin, require_customer
from storefront.exceptions import AuthorizationError, NotFoundError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder, submit_order
from storefront.order.status import UpdateOrderStatus
from storefront.product.management import AdjustStock, CreateProduct, DeactivateProduct
from storefront.product.product import Product
from storefront.shared.settings import StoreSettings, get_store_settings
from storefront.shipping.rates import calculate_shipping


def _valid_id(value: str, label: str) -> str:
    try:
        UUID(value)
    except ValueError:
        raise ValidationError({"id": [f"Invalid {label} ID"]}) from None
    return value


def _load_order(order_id: str) -> Order:
    try:
        return current_domain.repository_for(Order).get(_valid_id(order_id, "order"))
    except ObjectNotFoundError:
        raise NotFoundError("Order not found") from None


def _load_product(product_id: str) -> Product:
    try:
        return current_domain.repository_for(Product).get(_valid_id(product_id, "product"))
    except ObjectNotFoundError:
        raise NotFoundError("Product not found") from None


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderEnvelope)
async def place_order(
    body: PlaceOrderRequest,
    actor: Actor = Depends(require_customer),
    settings: StoreSettings = Depends(get_store_settings),
) -> OrderEnvelope:
    command = PlaceOrder(
        customer_id=actor.user_id,
        customer_role=actor.role,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        payment_method=body.payment_method,
        items=json.dumps([item.model_dump() for item in body.items]),
        subtotal=body.subtotal,
        shipping_cost=body.shipping_cost,
        tax=body.tax,
        total_amount=body.total_amount,
        notes=body.notes,
        tax_rate=settings.tax_rate,
    )
    order_id = submit_order(command)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderEnvelope(message="Order created successfully", data=OrderResponse.from_order(order))


@order_router.get("/my", response_model=OrderListEnvelope)
async def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(current_actor),
) -> OrderListEnvelope:
    result = current_domain.repository_for(Order).for_customer(actor.user_id, page=page, limit=limit)
    return OrderListEnvelope(
        data=[OrderResponse.from_order(order) for order in result.items],
        pagination=Pagination.of(page, limit, result.total),
    )


@order_router.post("/shipping-cost", response_model=ShippingCostEnvelope)
async def shipping_cost(
    body: ShippingCostRequest,
    settings: StoreSettings = Depends(get_store_settings),
) -> ShippingCostEnvelope:
    if not body.country or not body.county:
        raise ValidationError({"shipping": ["Country and county are required"]})

    cost = calculate_shipping(body.country, body.county, settings)
    return ShippingCostEnvelope(data=ShippingCostData(shipping_cost=cost, currency=settings.currency))


@order_router.get("", response_model=OrderListEnvelope)
async def list_orders(
    status: str | None = Query(None),
    search: str | None = Query(None),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: Actor = Depends(require_admin),
) -> OrderListEnvelope:
    start = datetime.combine(start_date, time.min, tzinfo=UTC) if start_date else None
    end = datetime.combine(end_date, time.max, tzinfo=UTC) if end_date else None

    result = current_domain.repository_for(Order).search(
        status=status,
        search=search.strip() if search else None,
        start_date=start,
        end_date=end,
        page=page,
        limit=limit,
    )
    return OrderListEnvelope(
        data=[OrderResponse.from_order(order) for order in result.items],
        pagination=Pagination.of(page, limit, result.total),
    )


@order_router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> OrderEnvelope:
    order = _load_order(order_id)
    if not order.is_owned_by(actor.user_id) and not actor.is_admin:
        raise AuthorizationError("Not authorized to view this order")
    return OrderEnvelope(data=OrderResponse.from_order(order))


@order_router.put("/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    admin: Actor = Depends(require_admin),
) -> OrderEnvelope:
    _load_order(order_id)
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
        admin_notes=body.admin_notes,
        location=body.location,
        message=body.message,
    )
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderEnvelope(message="Order status updated successfully", data=OrderResponse.from_order(order))


# ---------------------------------------------------------------------------
# Product Router (admin)
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductEnvelope)
async def create_product(body: CreateProductRequest, admin: Actor = Depends(require_admin)) -> ProductEnvelope:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        category=body.category,
        sizes=json.dumps([size.model_dump() for size in body.sizes]),
        price=body.price,
        stock=body.stock,
        low_stock_threshold=body.low_stock_threshold,
    )
    product_id = current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductEnvelope(message="Product created successfully", data=ProductResponse.from_product(product))


@product_router.get("/low-stock", response_model=ProductListEnvelope)
async def low_stock_products(admin: Actor = Depends(require_admin)) -> ProductListEnvelope:
    products = current_domain.repository_for(Product).low_stock()
    return ProductListEnvelope(data=[ProductResponse.from_product(product) for product in products])


@product_router.put("/{product_id}/stock", response_model=ProductEnvelope)
async def adjust_stock(
    product_id: str,
    body: AdjustStockRequest,
    admin: Actor = Depends(require_admin),
) -> ProductEnvelope:
    _load_product(product_id)
    command = AdjustStock(
        product_id=product_id,
        stock=body.stock,
        low_stock_threshold=body.low_stock_threshold,
    )
    current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductEnvelope(message="Stock updated successfully", data=ProductResponse.from_product(product))


@product_router.put("/{product_id}/deactivate", response_model=ProductEnvelope)
async def deactivate_product(product_id: str, admin: Actor = Depends(require_admin)) -> ProductEnvelope:
    _load_product(product_id)
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductEnvelope(message="Product deactivated", data=ProductResponse.from_product(product))
