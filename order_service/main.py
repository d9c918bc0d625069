import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from order_service.config import Settings, settings as default_settings
from order_service.errors import (
    InvalidCouponError,
    InvalidOrderError,
    InvalidTransitionError,
    OrderError,
    OrderNotFoundError,
)
from order_service.metrics import get_metrics_bytes, get_metrics_content_type, orders_in_store
from order_service.routes import admin, orders
from order_service.service import OrderService
from order_service.store import OrderStore

logging.basicConfig(
    level=default_settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[OrderError], int] = {
    InvalidOrderError: 400,
    InvalidCouponError: 400,
    OrderNotFoundError: 404,
    InvalidTransitionError: 409,
}


async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        400,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "detail": str(exc)},
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "detail": "internal error"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.getLogger().setLevel(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = OrderStore()
        app.state.order_service = OrderService(store, settings.currency_locale, settings.currency_code)
        # one live app per process: the gauge reads whichever store started last
        orders_in_store.set_function(store.count)
        logger.info("%s ready (locale=%s, currency=%s)", settings.app_name, settings.currency_locale, settings.currency_code)
        yield
        logger.info("%s stopped with %d order(s) in memory", settings.app_name, store.count())

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(orders.router)
    app.include_router(admin.router)
    app.add_exception_handler(OrderError, order_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus scrape endpoint."""
        return Response(
            content=get_metrics_bytes(),
            media_type=get_metrics_content_type(),
        )

    return app


app = create_app()
