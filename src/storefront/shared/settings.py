"""Store settings consumed by pricing, shipping and notifications.

Settings are administered elsewhere; here they are read from the environment
once per request and handed to commands as plain values.
"""

import os

from pydantic import BaseModel, Field

from storefront.order.pricing import DEFAULT_TAX_RATE


def current_environment() -> str:
    """Name of the running environment, lower-cased."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def is_production() -> bool:
    return current_environment() == "production"


class StoreSettings(BaseModel):
    store_name: str = "Rerendet Coffee"
    store_email: str = "orders@rerendetcoffee.com"
    currency: str = "KES"
    tax_rate: float = Field(default=DEFAULT_TAX_RATE, ge=0.0, le=1.0)
    shipping_price: float = Field(default=500.0, ge=0.0)
    nairobi_shipping_price: float = Field(default=200.0, ge=0.0)
    international_shipping_price: float = Field(default=2500.0, ge=0.0)
    admin_alert_email: str | None = None
    frontend_url: str = "http://localhost:3000"

    @classmethod
    def from_env(cls, environ=None) -> "StoreSettings":
        environ = os.environ if environ is None else environ
        mapping = {
            "store_name": "STORE_NAME",
            "store_email": "STORE_EMAIL",
            "currency": "STORE_CURRENCY",
            "tax_rate": "TAX_RATE",
            "shipping_price": "SHIPPING_PRICE",
            "nairobi_shipping_price": "NAIROBI_SHIPPING_PRICE",
            "international_shipping_price": "INTERNATIONAL_SHIPPING_PRICE",
            "admin_alert_email": "ADMIN_ALERT_EMAIL",
            "frontend_url": "FRONTEND_URL",
        }
        values = {field: environ[var] for field, var in mapping.items() if environ.get(var)}
        return cls(**values)


def get_store_settings() -> StoreSettings:
    """FastAPI dependency returning the current store settings."""
    return StoreSettings.from_env()
