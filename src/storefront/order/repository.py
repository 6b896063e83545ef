"""Repository for the Order aggregate."""

from protean.utils.query import Q

from storefront.domain import storefront
from storefront.order.order import Order


def _offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


@storefront.repository(part_of=Order)
class OrderRepository:
    """Order persistence plus the customer and admin listing queries.

    Listing methods return Protean ``ResultSet`` objects: ``items`` holds the
    requested page and ``total`` counts every match.
    """

    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def order_number_taken(self, order_number: str) -> bool:
        return self.find_by_order_number(order_number) is not None

    def for_customer(self, customer_id, page: int = 1, limit: int = 10):
        """A customer's orders, newest first."""
        return (
            self._dao.query.filter(customer_id=str(customer_id))
            .order_by("-created_at")
            .offset(_offset(page, limit))
            .limit(limit)
            .all()
        )

    def search(self, status=None, search=None, start_date=None, end_date=None, page: int = 1, limit: int = 10):
        """Admin order listing.

        Args:
            status: Exact status; ``None`` or ``"all"`` means any.
            search: Case-insensitive match on order number, customer name
                or customer email.
            start_date, end_date: Inclusive creation window, applied only
                when both are given.
        """
        query = self._dao.query

        if status and status != "all":
            query = query.filter(status=status)

        if search:
            query = query.filter(
                Q(order_number__icontains=search)
                | Q(customer_name__icontains=search)
                | Q(customer_email__icontains=search)
            )

        if start_date and end_date:
            query = query.filter(created_at__gte=start_date, created_at__lte=end_date)

        return query.order_by("-created_at").offset(_offset(page, limit)).limit(limit).all()
