"""Storefront bounded context: product stock, order placement and order lifecycle.

A single domain owns both the Product and Order aggregates so that placing an
order (reading products, persisting the order, decrementing stock) runs inside
one unit of work against one provider.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
