# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import (
    DomainError,
    IdentityError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Tlumaczenie wyjatkow domenowych na kody HTTP."""

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={"error": exc.message, "code": exc.code, "entity": exc.entity},
        )

    @app.exception_handler(InsufficientStockError)
    async def insufficient_stock(request: Request, exc: InsufficientStockError):
        return JSONResponse(
            status_code=409,
            content={
                "error": exc.message,
                "code": exc.code,
                "product_id": exc.product_id,
                "requested": exc.requested,
                "available": exc.available,
            },
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(request: Request, exc: InvalidTransitionError):
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=409,
            content={
                "error": exc.message,
                "code": exc.code,
                "current": exc.current.value,
                "requested": exc.requested.value,
            },
        )

    @app.exception_handler(IdentityError)
    async def identity_missing(request: Request, exc: IdentityError):
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=400, content={"error": exc.message, "code": exc.code})

    @app.exception_handler(DomainError)
    async def domain_error(request: Request, exc: DomainError):
        return JSONResponse(status_code=400, content={"error": exc.message, "code": exc.code})

    @app.exception_handler(ValueError)
    async def bad_request(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"error": str(exc), "code": "BAD_REQUEST"})
