# Point the module-level app at SQLite before anything imports orders.main
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from orders.config import Settings
from orders.db import init_db, make_engine, make_session_factory
from orders.main import create_app
from orders.repository import OrderRepository


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def repo(session_factory):
    return OrderRepository(session_factory)


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", db_startup_timeout=0)


@pytest.fixture
def app(settings, engine):
    return create_app(settings, engine=engine)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
