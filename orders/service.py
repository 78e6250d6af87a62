"""Order service: the contract consumed by the HTTP layer.

The service adds no business rules on top of the repository. Its only job
is observability: a failure coming out of the store is logged once, with
the operation it interrupted, and re-raised unchanged.
"""

import functools
import logging
import uuid
from typing import Iterable, List, Optional

from .domain import Order, OrderRepositoryPort

logger = logging.getLogger("orders.service")


def logs_failure(action: str):
    """Decorate a method so exceptions are logged with ``action`` and re-raised."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception:
                logger.exception("An error occurred while %s.", action, extra={"operation": action})
                raise

        return wrapper

    return decorator


class OrderService:
    """Service wrapping an ``OrderRepositoryPort``."""

    def __init__(self, repository: OrderRepositoryPort):
        """Initialize the service.

        Args:
            repository: Persistence port used for every operation.

        Raises:
            ValueError: If ``repository`` is None.
        """
        if repository is None:
            raise ValueError("repository is required")
        self.repository = repository

    @logs_failure("retrieving orders")
    def get_orders(self, order_ids: Optional[Iterable[uuid.UUID]] = None) -> List[Order]:
        return list(self.repository.get_orders(order_ids))

    @logs_failure("upserting orders")
    def upsert_orders(self, orders: List[Order]) -> List[Order]:
        return list(self.repository.upsert_orders(orders))
