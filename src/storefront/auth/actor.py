"""The authenticated caller of an API request."""

from pydantic import BaseModel

from storefront.order.placement import ADMIN_ROLES


class Actor(BaseModel):
    user_id: str
    role: str = "customer"
    email: str | None = None
    first_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() in ADMIN_ROLES
