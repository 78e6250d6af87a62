"""Engine and session wiring for the order store.

Connection parameters come from ``orders.config.Settings``. PostgreSQL is
reached through ``psycopg``; SQLite URLs are accepted for local runs and
tests.
"""

import logging
import time

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger("orders.db")


def make_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``.

    In-memory SQLite databases get a single shared connection so every
    session sees the same data across worker threads.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


def wait_for_db(engine: Engine, timeout: float = 30.0) -> None:
    """Block until the database accepts connections.

    Args:
        engine: Engine to probe with ``select 1``.
        timeout: Seconds to keep retrying before giving up.

    Raises:
        sqlalchemy.exc.OperationalError: The last connection error, once
            the deadline has passed.
    """
    deadline = time.monotonic() + timeout
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("select 1"))
            return
        except Exception:
            if time.monotonic() > deadline:
                raise
            logger.info("database not ready, retrying")
            time.sleep(1)


def init_db(engine: Engine) -> None:
    """Create missing tables."""
    Base.metadata.create_all(engine)
