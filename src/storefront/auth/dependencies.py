"""FastAPI dependencies that authenticate and authorize the caller."""

from fastapi import Depends, Header, HTTPException

from storefront.auth import get_token_resolver
from storefront.auth.actor import Actor
from storefront.exceptions import AuthorizationError
from storefront.order.placement import ADMIN_ORDER_MESSAGE


def current_actor(authorization: str | None = Header(default=None)) -> Actor:
    """Resolve the ``Authorization: Bearer <token>`` header to an actor."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    actor = get_token_resolver().resolve(authorization[7:].strip())
    if actor is None:
        raise HTTPException(status_code=401, detail="Not authorized, token failed")
    return actor


def require_admin(actor: Actor = Depends(current_actor)) -> Actor:
    if not actor.is_admin:
        raise AuthorizationError("Not authorized as an admin")
    return actor


def require_customer(actor: Actor = Depends(current_actor)) -> Actor:
    """Reject administrators before the request body is looked at."""
    if actor.is_admin:
        raise AuthorizationError(ADMIN_ORDER_MESSAGE)
    return actor
