"""Repository for the Product aggregate."""

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.repository(part_of=Product)
class ProductRepository:
    """Product persistence with the catalogue queries the admin screens need."""

    def low_stock(self) -> list[Product]:
        """Active products at or below their low-stock threshold, emptiest first."""
        active = self._dao.query.filter(is_active=True).all().items
        return sorted((p for p in active if p.is_low_stock), key=lambda p: p.stock)
