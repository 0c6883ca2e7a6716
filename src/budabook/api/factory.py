"""FastAPI application factory for the pricing service."""

from fastapi import FastAPI, Request, Response

from budabook.observability.correlation import (
    CORRELATION_ID_HEADER,
    reset_correlation_id,
    resolve_correlation_id,
    set_correlation_id,
)

from .routers import public
from .routes import day_tours, pricing, vouchers


def create_app() -> FastAPI:
    """Create the FastAPI app with all pricing routes mounted.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="BudaBook Pricing",
        docs_url=None,
        redoc_url=None,
    )

    # Correlation ID middleware
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = resolve_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    app.include_router(public.router)
    app.include_router(pricing.router)
    app.include_router(day_tours.router)
    app.include_router(vouchers.router)

    return app
