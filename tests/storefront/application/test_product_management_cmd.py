"""Application tests for admin product commands and the low-stock query."""

import json

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.product.management import AdjustStock, CreateProduct, DeactivateProduct
from storefront.product.product import Product


def _create(**overrides):
    fields = {
        "name": "Kenya Peaberry",
        "description": "Small round beans, bright acidity",
        "category": "coffee-beans",
        "sizes": json.dumps([{"size": "250g", "price": 650.0}]),
        "stock": 12,
        "low_stock_threshold": 4,
    }
    fields.update(overrides)
    return current_domain.process(CreateProduct(**fields), asynchronous=False)


class TestCreateProduct:
    def test_creates_product(self):
        product = current_domain.repository_for(Product).get(_create())
        assert product.name == "Kenya Peaberry"
        assert product.stock == 12
        assert product.in_stock is True
        assert product.price_for("250g") == 650.0

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            _create(category="tea")


class TestAdjustStock:
    def test_restock(self):
        product_id = _create(stock=0)
        current_domain.process(AdjustStock(product_id=product_id, stock=30), asynchronous=False)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.stock == 30
        assert product.in_stock is True

    def test_negative_stock_rejected(self):
        product_id = _create()
        with pytest.raises(ValidationError):
            current_domain.process(AdjustStock(product_id=product_id, stock=-1), asynchronous=False)
        assert current_domain.repository_for(Product).get(product_id).stock == 12


class TestDeactivateProduct:
    def test_deactivate(self):
        product_id = _create()
        current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
        assert current_domain.repository_for(Product).get(product_id).is_active is False


class TestLowStockQuery:
    def test_lists_active_low_stock_products_emptiest_first(self):
        _create(name="Plenty", stock=50)
        _create(name="Low", stock=3)
        _create(name="Empty", stock=0)
        hidden = _create(name="Retired", stock=1)
        current_domain.process(DeactivateProduct(product_id=hidden), asynchronous=False)

        names = [product.name for product in current_domain.repository_for(Product).low_stock()]
        assert names == ["Empty", "Low"]
