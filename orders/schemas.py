"""Pydantic schemas for orders.

This module exposes the request and response schemas of the orders API
and their mapping to the domain dataclasses. All structural validation
happens here so the service only ever sees well-formed orders.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .domain import LineItem, Order

# Must not be empty and must not start with whitespace
CUSTOMER_NAME_PATTERN = r"^\S.*$"


class LineItemIn(BaseModel):
    """Input schema for a single line item.

    Attributes:
        product_id: Product UUID.
        quantity: Units requested, zero or more.
    """

    product_id: uuid.UUID
    quantity: int = Field(ge=0)

    def to_domain(self) -> LineItem:
        return LineItem(product_id=self.product_id, quantity=self.quantity)


class OrderIn(BaseModel):
    """Input schema for an order.

    Attributes:
        id: Order UUID. A new one is generated when omitted.
        customer_name: Required; rejected when blank or whitespace-leading.
        items: Line items, in the order they should be stored.
        created_at: Optional creation timestamp; assigned on insert when
            absent.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    customer_name: str = Field(min_length=1, pattern=CUSTOMER_NAME_PATTERN)
    items: list[LineItemIn] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    def to_domain(self) -> Order:
        return Order(
            id=self.id,
            customer_name=self.customer_name,
            items=[it.to_domain() for it in self.items],
            created_at=self.created_at,
        )


class LineItemRead(BaseModel):
    product_id: uuid.UUID
    quantity: int


class OrderRead(BaseModel):
    """Read schema returned by the API."""

    id: uuid.UUID
    customer_name: str
    items: list[LineItemRead]
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderRead":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            items=[LineItemRead(product_id=it.product_id, quantity=it.quantity) for it in order.items],
            created_at=order.created_at,
        )
