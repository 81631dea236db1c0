# tutorlink/main.py
"""
TutorLink API application.

Mounts the versioned routers under /api/v1 and the ops endpoints at the
root, and installs the problem+json error handlers.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import health
from .routes.v1 import (
    admin as admin_v1,
    notifications as notifications_v1,
    reviews as reviews_v1,
    sessions as sessions_v1,
    tutors as tutors_v1,
    wishlist as wishlist_v1,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    else:
        init_db()

    if settings.redis_url:
        logger.info("Booking locks backed by Redis")
    else:
        logger.info("Booking locks are process-local")

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(PrometheusMiddleware)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# Note: Route order matters - static routes inside each router precede /{id} routes
api_v1.include_router(tutors_v1.router, prefix="/tutors")
api_v1.include_router(sessions_v1.router, prefix="/sessions")
api_v1.include_router(notifications_v1.router, prefix="/notifications")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(wishlist_v1.router, prefix="/wishlist")
api_v1.include_router(admin_v1.router, prefix="/admin")

app.include_router(api_v1)
app.include_router(health.router)


@app.get("/")
async def root() -> dict:
    return {"message": f"Welcome to the {BRAND_NAME} API", "version": API_VERSION, "docs": "/docs"}
