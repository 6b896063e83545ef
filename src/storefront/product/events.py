"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class LowStockDetected:
    """Stock fell to or below the product's low-stock threshold after a sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    current_stock = Integer(required=True)
    low_stock_threshold = Integer(required=True)
    detected_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """An administrator set a new stock level for a product."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    adjusted_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    """A product was withdrawn from sale. Products are never deleted."""

    __version__ = 1

    product_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
