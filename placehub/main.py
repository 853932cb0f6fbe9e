"""Main FastAPI application"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from placehub.api.exception_handlers import (
    bad_request_error_handler,
    integrity_error_handler,
    not_found_error_handler,
    placehub_error_handler,
    validation_exception_handler,
)
from placehub.api.routes import (
    collections_router,
    entitlements_router,
    feature_subscriptions_router,
    floorplan_pins_router,
    floorplans_router,
    legal_router,
    places_router,
    platform_router,
    price_bands_router,
    public_collections_router,
    public_floorplans_router,
    public_legal_router,
    resolve_router,
    sites_router,
)
from placehub.core.config import settings
from placehub.core.database import engine
from placehub.exceptions import BadRequestError, NotFoundError, PlaceHubError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(
        f"PlaceHub starting ({settings.environment}), default site: {settings.default_site_slug}"
    )
    # Schema is managed by Alembic (`placehub db migrate`)
    yield
    await engine.dispose()


app = FastAPI(
    title="PlaceHub - Multi-site Local Directory API",
    description="Site resolution, entitlements and content administration for local directory sites",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(NotFoundError, not_found_error_handler)
app.add_exception_handler(BadRequestError, bad_request_error_handler)
app.add_exception_handler(PlaceHubError, placehub_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)

# Include routers
app.include_router(entitlements_router)
app.include_router(feature_subscriptions_router)
app.include_router(floorplans_router)
app.include_router(floorplan_pins_router)
app.include_router(legal_router)
app.include_router(collections_router)
app.include_router(price_bands_router)
app.include_router(sites_router)
app.include_router(places_router)
app.include_router(platform_router)
app.include_router(resolve_router)
app.include_router(public_legal_router)
app.include_router(public_floorplans_router)
app.include_router(public_collections_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "PlaceHub",
        "version": "0.1.0",
        "description": "Multi-site local directory API",
        "status": "operational",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        database = "unavailable"
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
    }
