"""SQLAlchemy models for the order store.

The schema is a single ``orders`` table keyed by the order UUID. Line items
are not modelled as rows: the whole list is serialized into one JSON text
column by ``LineItemList`` and replaced wholesale on every write.
"""

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from .domain import LineItem, Order


class Base(DeclarativeBase):
    pass


class LineItemList(TypeDecorator):
    """Stores a list of ``LineItem`` as a JSON array, preserving order."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        items = value or []
        return json.dumps(
            [{"product_id": str(it.product_id), "quantity": it.quantity} for it in items],
            separators=(",", ":"),
        )

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return [
            LineItem(product_id=uuid.UUID(raw["product_id"]), quantity=int(raw["quantity"]))
            for raw in json.loads(value)
        ]


class OrderRecord(Base):
    """Persisted order row.

    Attributes:
        id: Order UUID, the only key used for matching on upsert.
        customer_name: Customer name as submitted.
        items: Serialized list of line items.
        created_at: Timestamp of the first insert, kept on later replaces.
    """

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    items: Mapped[list] = mapped_column(LineItemList, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> Order:
        created_at = self.created_at
        # SQLite drops the offset; stored values are always UTC
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Order(
            id=self.id,
            customer_name=self.customer_name,
            items=list(self.items),
            created_at=created_at,
        )
