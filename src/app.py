"""Storefront FastAPI application.

Exposes every storefront operation over HTTP. Commands are processed
synchronously through the storefront domain; each request runs inside the
domain's context with a ``request_id`` bound into the structured log context.

Usage:
    uvicorn app:create_app --factory --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain import storefront
from storefront.shared.exceptions import (
    InsufficientStock,
    InvalidStatus,
    MissingProduct,
    PermissionDenied,
    StorefrontError,
    Unauthenticated,
    summarize,
    validation_error_from,
)
from storefront.shared.logging import add_context, clear_context, configure_logging
from storefront.shared.settings import flag

logger = structlog.get_logger(__name__)

# Subclasses inherit their parent's status (InvalidCredential → 401, AccountBlocked → 403).
_STATUS_CODES = {
    Unauthenticated: 401,
    PermissionDenied: 403,
    InvalidStatus: 409,
    InsufficientStock: 409,
    MissingProduct: 409,
}


def status_code_for(exc: StorefrontError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_CODES:
            return _STATUS_CODES[cls]
    return 400


def _envelope(status_code: int, kind: str, message: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"kind": kind, "message": message, "details": details or {}}},
        headers=headers,
    )


def create_app(init_domain: bool = True) -> FastAPI:
    """Build the application.

    ``init_domain`` traverses and initializes the storefront domain; callers
    that have already initialized it (the test suite) pass False.
    """
    if init_domain:
        storefront.init()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        with storefront.domain_context():
            configure_logging(log_to_file=flag("log_to_file"))
        logger.info("Storefront started", domain=storefront.name)
        yield
        logger.info("Storefront stopped")

    app = FastAPI(
        title="Storefront API",
        description="Order fulfillment backend: catalogue, inventory, ordering and identity",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context and tag log lines with a request id."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        clear_context()
        add_context(request_id=request_id, path=request.url.path)
        with storefront.domain_context():
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # -----------------------------------------------------------------------
    # Error envelope
    # -----------------------------------------------------------------------
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        logger.info("Request rejected", kind=exc.kind, message=exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(status_code=status_code_for(exc), content={"error": exc.to_dict()}, headers=headers)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return _envelope(422, "ValidationError", summarize(exc.messages), {"fields": exc.messages})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = validation_error_from(exc).messages
        return _envelope(422, "ValidationError", summarize(messages), {"fields": messages})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        return _envelope(404, "NotFound", summarize(exc.messages))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Storage failure", error=str(exc), exc_info=exc)
        return _envelope(500, "StorageError", "Internal server error")

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    from storefront.catalogue.api import admin_router as product_admin_router
    from storefront.catalogue.api import product_router
    from storefront.identity.api import admin_router as user_admin_router
    from storefront.identity.api import auth_router
    from storefront.inventory.api import router as inventory_router
    from storefront.ordering.api import admin_router as order_admin_router
    from storefront.ordering.api import router as order_router

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(product_admin_router)
    app.include_router(inventory_router)
    app.include_router(order_router)
    app.include_router(order_admin_router)
    app.include_router(user_admin_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name})

    return app
