"""Domain models and ports for orders.

This module contains the dataclasses exchanged between the HTTP layer, the
service and the repository, plus the protocol (port) the service depends
on. Nothing here knows about SQLAlchemy or FastAPI.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Protocol, Sequence


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class LineItem:
    """A single line item in an order.

    Attributes:
        product_id: Opaque product identifier.
        quantity: Number of units requested (zero is allowed).

    Items have no identity of their own; they are always replaced together
    with the order that owns them.
    """

    product_id: uuid.UUID
    quantity: int


@dataclass
class Order:
    """Container for order data.

    Attributes:
        customer_name: Name of the customer placing the order.
        items: Ordered list of LineItem objects.
        id: Identity of the order. Two orders are the same order iff their
            ids are equal. Generated when the caller does not supply one.
        created_at: UTC timestamp of the first persistence, or None when the
            store should assign it on insert.
    """

    customer_name: str
    items: List[LineItem] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: Optional[datetime] = None


# ---- Ports (DIP) ----
class OrderRepositoryPort(Protocol):
    """Port describing order persistence used by the service."""

    def get_orders(self, order_ids: Optional[Iterable[uuid.UUID]] = None) -> Sequence[Order]:
        """Return persisted orders.

        Args:
            order_ids: None for every order; otherwise only the orders whose
                id is in the collection. An empty collection matches nothing.
        """
        raise NotImplementedError()

    def upsert_orders(self, orders: Sequence[Order]) -> Sequence[Order]:
        """Insert or replace the given orders as one unit of work."""
        raise NotImplementedError()
