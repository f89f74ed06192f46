"""
SpareStock - Warehouse Sparepart Stock Ledger
FastAPI Application Entry Point
"""
import uvicorn
from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from sparestock.core import settings, engine, Base
from sparestock.core.logging_config import setup_logging
from sparestock.api.router import api_router
from sparestock.api.errors import install_error_handlers
from sparestock.jobs import start_scheduler, stop_scheduler

setup_logging(settings.LOG_LEVEL, settings.LOGS_PATH)
logger = logging.getLogger(__name__)


# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables if not exist
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT}")

    # Background ledger verification
    if settings.LEDGER_CHECK_ENABLED:
        start_scheduler()

    yield

    # Shutdown
    stop_scheduler()
    logger.info(f"{settings.APP_NAME} shutting down")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Sparepart stock ledger with approval-gated stock out and stock opname",
    version="1.0.0",
    lifespan=lifespan
)

install_error_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api")


# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )
