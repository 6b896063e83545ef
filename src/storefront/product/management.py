"""Product management: admin commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=100, sanitize=False)
    description = Text(required=True, sanitize=False)
    category = String(max_length=50)
    sizes = Text(sanitize=False)  # JSON: list of {size, price}
    price = Float()
    stock = Integer(default=0)
    low_stock_threshold = Integer(default=5)


@storefront.command(part_of="Product")
class AdjustStock:
    """Set a product's stock to an absolute level."""

    product_id = Identifier(required=True)
    stock = Integer(required=True)
    low_stock_threshold = Integer()


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        sizes = json.loads(command.sizes) if isinstance(command.sizes, str) else (command.sizes or [])

        product = Product.create(
            name=command.name,
            description=command.description,
            sizes=sizes,
            category=command.category or "coffee-beans",
            price=command.price,
            stock=command.stock or 0,
            low_stock_threshold=5 if command.low_stock_threshold is None else command.low_stock_threshold,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.stock, low_stock_threshold=command.low_stock_threshold)
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
