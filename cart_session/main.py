"""Cart Session API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CartSessionError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Shared engine built on startup and its sweep stopped on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - OpenAPI docs served by FastAPI at /docs (title/version/description from settings)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cart_session.api.dependencies import get_cart_engine, reset_cart_engine
from cart_session.api.error_handlers import register_error_handlers
from cart_session.api.routes import cart, health
from cart_session.config import get_settings
from cart_session.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    get_cart_engine()
    logger.info("Cart Session API started")
    yield
    reset_cart_engine()
    logger.info("Cart Session API shutting down")


settings = get_settings()
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(cart.router)

register_error_handlers(app)
