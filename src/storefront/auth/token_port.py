"""Token resolver port: maps bearer tokens to actors.

Issuing and verifying tokens belongs to the identity service; the storefront
only needs to know who is calling.
"""

from abc import ABC, abstractmethod

from storefront.auth.actor import Actor


class TokenResolver(ABC):
    @abstractmethod
    def resolve(self, token: str) -> Actor | None:
        """Return the actor the token belongs to, or None if it is not valid."""
        ...
