"""
Eventos API - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app import models  # noqa: F401  registers tables on Base.metadata
from app.api import routes_catalog, routes_event, routes_event_location, routes_public, routes_user
from app.api.error_handlers import register_error_handlers
from app.services.repositories import uses_sql

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if uses_sql():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    logger.info(f"Storage backend: {settings.STORAGE_BACKEND}")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Eventos API",
    description="Events, venues, tags and enrollments",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_user.router, prefix="/api/user", tags=["user"])
app.include_router(routes_event.router, prefix="/api/event", tags=["event"])
app.include_router(routes_event_location.router, prefix="/api/event-location", tags=["event-location"])
app.include_router(routes_catalog.tags_router, prefix="/api/tags", tags=["tags"])
app.include_router(routes_catalog.provinces_router, prefix="/api/provinces", tags=["provinces"])
app.include_router(routes_catalog.locations_router, prefix="/api/locations", tags=["locations"])

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
