"""Shipping cost lookup by destination."""

from storefront.shared.settings import StoreSettings

HOME_COUNTRY = "kenya"
HOME_COUNTY = "nairobi"


def calculate_shipping(country: str, county: str, settings: StoreSettings) -> float:
    """Flat shipping charge for a destination.

    Nairobi deliveries use the local rate, the rest of Kenya the standard
    rate, and anything abroad the international rate.
    """
    if not country or not county:
        raise ValueError("Country and county are required")

    if country.strip().lower() != HOME_COUNTRY:
        return settings.international_shipping_price
    if county.strip().lower() == HOME_COUNTY:
        return settings.nairobi_shipping_price
    return settings.shipping_price
