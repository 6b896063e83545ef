"""Input sanitation for customer-supplied text.

Shipping addresses end up in admin screens and in outgoing emails, so every
free-text field is stripped of markup before it is stored.
"""

import re

_SCRIPT_BLOCK = re.compile(r"<\s*(script|style)[^>]*>.*?<\s*/\s*\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_JS_PROTOCOL = re.compile(r"javascript\s*:", re.IGNORECASE)
_EVENT_ATTRIBUTE = re.compile(r"\bon\w+\s*=", re.IGNORECASE)

_EMAIL = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9\-]+(\.[a-z0-9\-]+)*\.[a-z]{2,}$")
# Optional leading +, then 9 to 15 digits
_PHONE = re.compile(r"^\+?\d{9,15}$")


def sanitize_text(value):
    """Strip markup, script blocks and inline handlers from a string.

    Non-string values are returned unchanged.
    """
    if not isinstance(value, str):
        return value

    cleaned = _SCRIPT_BLOCK.sub("", value)
    cleaned = _TAG.sub("", cleaned)
    cleaned = _JS_PROTOCOL.sub("", cleaned)
    cleaned = _EVENT_ATTRIBUTE.sub("", cleaned)
    return cleaned.strip()


def sanitize_mapping(data: dict | None) -> dict:
    """Apply ``sanitize_text`` to every value of a flat mapping."""
    return {key: sanitize_text(value) for key, value in (data or {}).items()}


def sanitize_email(value) -> str | None:
    """Lower-cased, trimmed email, or None when it is not a plausible address."""
    if not isinstance(value, str):
        return None

    email = sanitize_text(value).lower()
    if ".." in email or not _EMAIL.match(email):
        return None
    return email


def sanitize_phone(value) -> str | None:
    """Phone number with spaces, dashes and parentheses removed, or None if invalid."""
    if not isinstance(value, str):
        return None

    phone = re.sub(r"[\s\-()]", "", sanitize_text(value))
    if not _PHONE.match(phone):
        return None
    return phone
