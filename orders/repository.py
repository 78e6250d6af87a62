"""Repository layer for persisting orders.

This module translates the two domain operations, filtered retrieval and
batch upsert, into SQLAlchemy session work. It keeps a thin interface that
speaks domain ``Order`` objects only, so callers are not coupled to ORM
types.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .domain import Order
from .models import OrderRecord


def _created_at(order: Order) -> datetime:
    ts = order.created_at
    if ts is None:
        return datetime.now(timezone.utc)
    # naive timestamps are taken as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class OrderRepository:
    """Repository that persists Order domain objects using SQLAlchemy.

    Each call opens its own session from the factory handed in at
    construction, so an instance can be shared between requests.
    """

    def __init__(self, session_factory: sessionmaker):
        if session_factory is None:
            raise ValueError("session_factory is required")
        self._session_factory = session_factory

    def get_orders(self, order_ids: Optional[Iterable[uuid.UUID]] = None) -> List[Order]:
        """Return persisted orders, optionally filtered by id.

        Args:
            order_ids: None returns every order. Any other value, including
                an empty collection, restricts the result to orders whose id
                is a member; ids with no stored order are skipped.

        Returns:
            List of domain orders in store order.
        """
        wanted = None if order_ids is None else set(order_ids)
        if wanted is not None and not wanted:
            return []
        with self._session_factory() as s:
            return [r.to_domain() for r in self._select(s, wanted)]

    def upsert_orders(self, orders: Sequence[Order]) -> List[Order]:
        """Insert new orders and replace existing ones in one transaction.

        Existing records are found with a single query over the whole id
        set. A matching record gets the incoming customer name and item
        list; its ``created_at`` stays as first stored. If the batch holds
        the same id more than once, the last occurrence wins, timestamp
        included for orders inserted by this batch.

        Args:
            orders: Orders to persist.

        Returns:
            The input orders, as submitted.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: When the store rejects the batch.
                Nothing from the batch is persisted in that case.
        """
        orders = list(orders)
        if not orders:
            return []

        with self._session_factory() as s:
            try:
                staged = self._existing_by_id(s, {o.id for o in orders})
                inserted = set()
                for order in orders:
                    record = staged.get(order.id)
                    if record is None:
                        record = OrderRecord(id=order.id)
                        s.add(record)
                        staged[order.id] = record
                        inserted.add(order.id)
                    # only records stored before this batch keep their timestamp
                    if order.id in inserted:
                        record.created_at = _created_at(order)
                    record.customer_name = order.customer_name
                    record.items = list(order.items)
                s.commit()
            except Exception:
                s.rollback()
                raise
        return orders

    def _existing_by_id(self, s: Session, ids: set) -> Dict[uuid.UUID, OrderRecord]:
        return {r.id: r for r in self._select(s, ids)}

    @staticmethod
    def _select(s: Session, ids: Optional[set]):
        stmt = select(OrderRecord)
        if ids is not None:
            stmt = stmt.where(OrderRecord.id.in_(ids))
        return s.scalars(stmt).all()
