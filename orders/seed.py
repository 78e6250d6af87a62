"""Demo orders loaded at startup when ``SEED_DEMO_DATA`` is enabled."""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from .domain import LineItem, Order, OrderRepositoryPort

logger = logging.getLogger("orders.seed")

_SEED_CREATED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)
_PRODUCT_1 = uuid.UUID("a0000000-0000-0000-0000-000000000001")
_PRODUCT_2 = uuid.UUID("a0000000-0000-0000-0000-000000000002")


def demo_orders() -> list[Order]:
    return [
        Order(
            id=uuid.UUID("00000000-0000-0000-0000-000000000001"),
            customer_name="Test Customer 1",
            items=[LineItem(_PRODUCT_1, 1)],
            created_at=_SEED_CREATED_AT,
        ),
        Order(
            id=uuid.UUID("00000000-0000-0000-0000-000000000002"),
            customer_name="Test Customer 2",
            items=[LineItem(_PRODUCT_1, 100), LineItem(_PRODUCT_2, 0)],
            created_at=_SEED_CREATED_AT,
        ),
    ]


def seed_demo_orders(repository: OrderRepositoryPort) -> bool:
    """Upsert the demo orders.

    Every server worker seeds on startup. When two workers race on a fresh
    database, the loser's batch hits the primary key of rows the winner just
    committed; the repository rolls it back and the demo orders are already
    in place, so the conflict is treated as done.

    Returns:
        bool: True when this call wrote the orders, False when another
        writer had already inserted them.
    """
    try:
        repository.upsert_orders(demo_orders())
    except IntegrityError:
        logger.info("demo orders already seeded by another worker")
        return False
    return True
