"""QuickBite FastAPI application.

Food-order web server: menu, clients, orders, payments and the gateway
webhook. Routes are plain ``def`` functions, so FastAPI runs each request in
its threadpool; per-order locks serialize the work that must not overlap.

Usage:
    uvicorn app:create_app --factory --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError as ProteanObjectNotFoundError
from protean.exceptions import ValidationError as ProteanValidationError

from bootstrap import Container, build_container
from customers.api import router as client_router
from customers.client.errors import ClientAlreadyExists
from menu.api import product_router
from menu.product.errors import ProductNotFound
from ordering.api import order_router
from ordering.order.errors import OrderAlreadyExists
from payments.api import payment_router
from payments.gateway.errors import GatewayAuthError, GatewayRequestError
from shared.config import Settings, load_settings
from shared.db import provider_names
from shared.domain import init_domain, quickbite
from shared.errors import DomainError, ObjectNotFoundError, StaleStateError, ValidationError
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

RETRY_AFTER_SECONDS = "5"


def _status_code(exc: DomainError) -> int:
    if isinstance(exc, (OrderAlreadyExists, ClientAlreadyExists)):
        return 409
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, ObjectNotFoundError):
        return 404
    if isinstance(exc, StaleStateError):
        return 409
    if isinstance(exc, GatewayAuthError):
        return 502
    if isinstance(exc, GatewayRequestError):
        return 503
    return 502


def _error_response(status_code: int, exc: DomainError) -> JSONResponse:
    headers = {"Retry-After": RETRY_AFTER_SECONDS} if getattr(exc, "retriable", False) else None
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "messages": exc.messages},
        headers=headers,
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = _status_code(exc)
    logger.warning(
        "Request failed",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return _error_response(status_code, exc)


async def field_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Errors raised by Protean itself: field validation and unknown ids."""
    status_code = 404 if isinstance(exc, ProteanObjectNotFoundError) else 422
    logger.warning(
        "Request failed",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"error": type(exc).__name__, "messages": exc.messages})


async def product_not_found_handler(request: Request, exc: ProductNotFound) -> JSONResponse:
    # An order naming an unknown product is an invalid request, not a missing resource
    status_code = 422 if request.url.path.startswith("/order") else 404
    logger.warning(
        "Request failed",
        method=request.method,
        path=request.url.path,
        error=type(exc).__name__,
        product_ids=exc.product_ids,
        status_code=status_code,
    )
    return _error_response(status_code, exc)


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    """Build the application.

    Without a container, the domain is initialized from ``settings`` (or the
    environment) and a container is built for it.
    """
    if container is None:
        settings = settings or load_settings()
        configure_logging(settings)
        init_domain(settings)
        container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application started",
            env=container.settings.env.value,
            database=provider_names(quickbite),
            gateway=container.gateway.name,
        )
        yield
        logger.info("Application stopped")

    app = FastAPI(
        title="QuickBite API",
        description="Food ordering — menu, clients, orders and payments",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the QuickBite domain context for each request."""
        with quickbite.domain_context():
            response = await call_next(request)
        return response

    app.add_exception_handler(ProductNotFound, product_not_found_handler)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(ProteanValidationError, field_error_handler)
    app.add_exception_handler(ProteanObjectNotFoundError, field_error_handler)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(product_router)
    app.include_router(client_router)
    app.include_router(order_router)
    app.include_router(payment_router)

    # -----------------------------------------------------------------------
    # Health / root
    # -----------------------------------------------------------------------
    @app.get("/health")
    def health():
        return JSONResponse(
            content={
                "status": "ok",
                "database": provider_names(quickbite),
                "gateway": container.gateway.name,
            }
        )

    return app
