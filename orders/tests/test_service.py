"""Unit tests for the OrderService wrapper.

Stub repositories drive the outcomes: the service must pass results
through untouched, and on failure log once with the operation context and
re-raise the original exception.
"""

import logging
import uuid

import pytest
from sqlalchemy.exc import OperationalError

from orders.domain import LineItem, Order
from orders.service import OrderService


class StubRepositoryOK:
    """Repository stub that records calls and echoes upserts."""

    def __init__(self, stored=None):
        self.stored = stored or []
        self.calls = []

    def get_orders(self, order_ids=None):
        self.calls.append(("get", order_ids))
        return tuple(self.stored)

    def upsert_orders(self, orders):
        self.calls.append(("upsert", orders))
        return iter(orders)


class StubRepositoryFail:
    """Repository stub whose store is unreachable."""

    def __init__(self):
        self.error = OperationalError("SELECT", {}, Exception("connection refused"))

    def get_orders(self, order_ids=None):
        raise self.error

    def upsert_orders(self, orders):
        raise self.error


def test_constructor_requires_repository():
    with pytest.raises(ValueError):
        OrderService(None)


def test_get_orders_passes_filter_and_returns_list():
    order = Order(customer_name="Customer 1", items=[LineItem(uuid.uuid4(), 1)])
    repo = StubRepositoryOK([order])
    service = OrderService(repo)

    ids = [order.id]
    out = service.get_orders(ids)

    assert out == [order]
    assert isinstance(out, list)
    assert repo.calls == [("get", ids)]


def test_get_orders_without_filter_passes_none():
    repo = StubRepositoryOK()
    OrderService(repo).get_orders()
    assert repo.calls == [("get", None)]


def test_upsert_orders_returns_repository_result_as_list():
    orders = [Order(customer_name="A"), Order(customer_name="B")]
    repo = StubRepositoryOK()

    out = OrderService(repo).upsert_orders(orders)

    assert out == orders
    assert repo.calls == [("upsert", orders)]


def test_get_orders_failure_is_logged_and_reraised(caplog):
    repo = StubRepositoryFail()
    service = OrderService(repo)

    with caplog.at_level(logging.ERROR, logger="orders.service"):
        with pytest.raises(OperationalError) as e:
            service.get_orders([uuid.uuid4()])

    assert e.value is repo.error
    errors = [r for r in caplog.records if r.name == "orders.service"]
    assert len(errors) == 1
    assert "retrieving orders" in errors[0].getMessage()
    assert errors[0].exc_info is not None


def test_upsert_orders_failure_is_logged_and_reraised(caplog):
    repo = StubRepositoryFail()
    service = OrderService(repo)

    with caplog.at_level(logging.ERROR, logger="orders.service"):
        with pytest.raises(OperationalError) as e:
            service.upsert_orders([Order(customer_name="A")])

    assert e.value is repo.error
    errors = [r for r in caplog.records if r.name == "orders.service"]
    assert len(errors) == 1
    assert "upserting orders" in errors[0].getMessage()
    assert errors[0].operation == "upserting orders"
