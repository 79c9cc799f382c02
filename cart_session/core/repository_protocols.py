"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Store implementations hand out and accept deep copies, never live references
    - get() returns None for never-stored keys and raises CartExpiredError for
      expired ones (evicting first)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Sync methods: the store is in-process memory, no IO to await
    - ttl is part of the contract: the store that evicts also defines expires_at
"""

from datetime import timedelta
from typing import Protocol

from cart_session.core.cart import Cart


class CartStore(Protocol):
    """Contract for cart session storage, implemented by infrastructure."""
    ttl: timedelta

    def put(self, cart: Cart) -> Cart: ...
    def get(self, cart_id: str) -> Cart | None: ...
    def update(self, cart: Cart) -> Cart: ...
    def delete(self, cart_id: str) -> None: ...
    def count(self) -> int: ...
    def clear(self) -> None: ...
