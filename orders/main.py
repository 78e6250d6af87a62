"""Orders service API built with FastAPI.

This module exposes endpoints to check service health, to upsert a batch
of orders and to read orders back, in bulk or by id. Validation is
performed with the Pydantic schemas in ``orders.schemas``; persistence is
delegated to ``OrderService`` wrapping the SQLAlchemy-backed
``OrderRepository``.

Status codes:
    - 200 on reads, 201 on a successful upsert.
    - 400 for malformed payloads and for an empty order list.
    - 404 when a single order is requested and does not exist.
    - 500 when the store fails; the service has already logged it.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from .config import Settings
from .db import init_db, make_engine, make_session_factory, wait_for_db
from .logging_setup import REQUEST_ID_CTX, configure_logging
from .repository import OrderRepository
from .schemas import OrderIn, OrderRead
from .seed import seed_demo_orders
from .service import OrderService

logger = logging.getLogger("orders.api")

ORDERS_URL = "/api/orders"


def get_order_service(request: Request) -> OrderService:
    """Return the service wired into the running application."""
    return request.app.state.order_service


def _internal_error() -> JSONResponse:
    return JSONResponse({"detail": "INTERNAL_SERVER_ERROR"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service settings; read from the environment when omitted.
        engine: Pre-built engine, e.g. an in-memory SQLite engine in tests.
            When omitted one is created from ``settings.database_url`` and
            disposed on shutdown.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    owns_engine = engine is None
    engine = engine or make_engine(settings.database_url)
    repository = OrderRepository(make_session_factory(engine))
    service = OrderService(repository)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # startup work blocks on the database; keep it off the event loop
        await run_in_threadpool(wait_for_db, engine, settings.db_startup_timeout)
        await run_in_threadpool(init_db, engine)
        if settings.seed_demo_data and await run_in_threadpool(seed_demo_orders, repository):
            logger.info("demo orders seeded")
        yield
        if owns_engine:
            engine.dispose()

    app = FastAPI(title="Orders Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.order_service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location", "X-Request-ID"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"detail": jsonable_encoder(exc.errors())},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = rid
        token = REQUEST_ID_CTX.set(rid)
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "request handled",
                extra={"path": request.url.path, "method": request.method, "status": status_code},
            )
            REQUEST_ID_CTX.reset(token)
        response.headers["X-Request-ID"] = rid
        return response

    @app.get("/health")
    def health():
        """Liveness/health probe endpoint."""
        return {"ok": True}

    @app.get(ORDERS_URL, response_model=List[OrderRead], response_model_exclude_none=True)
    def list_orders(
        order_ids: Optional[List[uuid.UUID]] = Query(default=None),
        service: OrderService = Depends(get_order_service),
    ):
        """List orders, optionally restricted to the given ids.

        Unknown ids are skipped rather than reported.
        """
        try:
            orders = service.get_orders(order_ids)
        except Exception:
            return _internal_error()
        return [OrderRead.from_domain(o) for o in orders]

    @app.get(ORDERS_URL + "/{oid}", response_model=OrderRead, response_model_exclude_none=True)
    def retrieve_order(oid: uuid.UUID, service: OrderService = Depends(get_order_service)):
        try:
            found = service.get_orders([oid])
        except Exception:
            return _internal_error()
        if not found:
            return JSONResponse({"detail": "NOT_FOUND"}, status_code=status.HTTP_404_NOT_FOUND)
        return OrderRead.from_domain(found[0])

    @app.post(
        ORDERS_URL,
        response_model=List[OrderRead],
        response_model_exclude_none=True,
        status_code=status.HTTP_201_CREATED,
    )
    def upsert_orders(
        payload: List[OrderIn],
        response: Response,
        service: OrderService = Depends(get_order_service),
    ):
        """Insert or replace a batch of orders atomically.

        Returns the submitted orders with 201 and a ``Location`` header that
        reads them back.
        """
        if not payload:
            return JSONResponse({"detail": "EMPTY_ORDER_LIST"}, status_code=status.HTTP_400_BAD_REQUEST)

        logger.info("upserting orders", extra={"count": len(payload)})
        try:
            saved = service.upsert_orders([o.to_domain() for o in payload])
        except Exception:
            return _internal_error()

        response.headers["Location"] = ORDERS_URL + "?" + urlencode([("order_ids", str(o.id)) for o in saved])
        return [OrderRead.from_domain(o) for o in saved]

    return app


app = create_app()
