"""In-memory token resolver for development and tests."""

from storefront.auth.actor import Actor
from storefront.auth.token_port import TokenResolver


class InMemoryTokenResolver(TokenResolver):
    def __init__(self):
        self.tokens: dict[str, Actor] = {}

    def register(self, token: str, actor: Actor) -> None:
        self.tokens[token] = actor

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def resolve(self, token: str) -> Actor | None:
        return self.tokens.get(token)

    def reset(self):
        self.tokens.clear()
