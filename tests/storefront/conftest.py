import json

import pytest
from protean.utils.globals import current_domain

from storefront.notifications.channel import get_email_channel
from storefront.order.placement import PlaceOrder
from storefront.product.product import Product

ADDRESS = {
    "first_name": "Wanjiru",
    "last_name": "Kamau",
    "email": "Wanjiru@Example.com",
    "phone": "0712 345-678",
    "street": "12 Moi Avenue",
    "city": "Nairobi",
    "county": "Nairobi",
    "country": "Kenya",
    "postal_code": "00100",
}


@pytest.fixture(autouse=True)
def _ctx():
    from storefront.domain import storefront

    with storefront.domain_context():
        yield


@pytest.fixture()
def email_channel():
    channel = get_email_channel()
    channel.reset()
    return channel


@pytest.fixture()
def shipping_address():
    return dict(ADDRESS)


@pytest.fixture()
def create_product():
    """Factory persisting a product; 250g costs 500 and 500g costs 950 unless overridden."""

    def _create(name="Kenya AA", stock=10, sizes=None, price=None, low_stock_threshold=5):
        product = Product.create(
            name=name,
            description=f"{name} whole beans",
            sizes=[{"size": "250g", "price": 500.0}, {"size": "500g", "price": 950.0}] if sizes is None else sizes,
            price=price,
            stock=stock,
            low_stock_threshold=low_stock_threshold,
        )
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _create


@pytest.fixture()
def order_command():
    """Factory for PlaceOrder commands.

    ``lines`` is a list of ``(product, quantity, size, client_price)`` tuples.
    Shipping defaults to 200 and the tax rate to 16%.
    """

    def _build(lines, total_amount, customer_id="cust-001", role="customer", **overrides):
        cart = [
            {
                "product_id": str(product.id),
                "name": product.name,
                "price": client_price,
                "quantity": quantity,
                "size": size,
            }
            for product, quantity, size, client_price in lines
        ]
        fields = {
            "customer_id": customer_id,
            "customer_role": role,
            "shipping_address": json.dumps(overrides.pop("shipping_address", ADDRESS)),
            "payment_method": "mpesa",
            "items": json.dumps(cart),
            "shipping_cost": 200.0,
            "total_amount": total_amount,
            "tax_rate": 0.16,
        }
        fields.update(overrides)
        return PlaceOrder(**fields)

    return _build


@pytest.fixture()
def stock_of():
    def _stock(product_id) -> int:
        return current_domain.repository_for(Product).get(product_id).stock

    return _stock
