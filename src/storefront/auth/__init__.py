"""Token resolver registry.

The in-memory resolver is used unless a deployment installs another one with
``set_token_resolver`` at startup.
"""

from storefront.auth.token_port import TokenResolver

_resolver: TokenResolver | None = None


def get_token_resolver() -> TokenResolver:
    global _resolver
    if _resolver is None:
        from storefront.auth.memory_tokens import InMemoryTokenResolver

        _resolver = InMemoryTokenResolver()
    return _resolver


def set_token_resolver(resolver: TokenResolver) -> None:
    global _resolver
    _resolver = resolver


def reset_token_resolver():
    """Drop the configured resolver (useful for testing)."""
    global _resolver
    _resolver = None
