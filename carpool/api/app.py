"""
FastAPI application factory.

* Registers routes for users, trips and admin.
* Maps booking errors to HTTP responses.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from carpool.api.errors import init_error_handlers
from carpool.api.middleware import limiter
from carpool.api.routes import admin, trips, users
from carpool.config import settings

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Car-pooling API ready (lead time=%dm, start grace=%dm, "
        "cancel grace=%dm, overbooking=%s)",
        settings.lead_time_minutes,
        settings.start_grace_minutes,
        settings.cancel_grace_minutes,
        settings.allow_overbooking,
    )
    yield
    logger.info("Car-pooling API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Car-Pooling API",
        description=(
            "Car owners publish trips with seat capacity and a scheduled "
            "departure; riders enroll; owners start or cancel trips subject "
            "to timing and capacity rules."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Booking errors -> status codes
    init_error_handlers(app)

    # Routers
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
