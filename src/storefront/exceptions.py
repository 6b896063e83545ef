"""Business-rule failures raised by the storefront domain.

Every subclass of Protean's ``ValidationError`` carries the usual
``{field: [message, ...]}`` payload, so callers that already handle
validation errors keep working; the subclasses let the API layer (and tests)
tell stock, pricing and lifecycle failures apart.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StockError(ValidationError):
    """Requested quantity exceeds what the product has on hand."""


class PriceIntegrityError(ValidationError):
    """Server-side totals disagree with the totals the client submitted."""


class TransitionError(ValidationError):
    """The requested order status is not reachable from the current one."""


class NotFoundError(ObjectNotFoundError):
    """A referenced order does not exist."""


class AuthorizationError(Exception):
    """The actor may not perform this operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
