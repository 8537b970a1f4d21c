# -*- coding: utf-8 -*-
"""
Workshop CRM - Main FastAPI Application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workshop.config import get_settings
from workshop.api import (
    auth_router, customers_router, vehicles_router,
    orders_router, drafts_router, reports_router,
)
from workshop.services import get_session_service, get_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events"""
    # Startup
    logger.info("Starting Workshop CRM...")
    settings = get_settings()
    logger.info(f"Backend URL: {settings.API_URL}")

    session = get_session_service()
    if session.is_authenticated:
        logger.info(f"Signed in as {session.user.email}")

    yield

    # Shutdown
    logger.info("Shutting down Workshop CRM...")


# Create FastAPI app
app = FastAPI(
    title="Workshop CRM",
    description="Customers, vehicles and service orders for a vehicle workshop",
    version=get_settings().APP_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(customers_router, prefix="/api")
app.include_router(vehicles_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(drafts_router, prefix="/api")
app.include_router(reports_router, prefix="/api")


# ==================== Health Check ====================

@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint"""
    store = get_store()
    return {
        "status": "ok",
        "service": "workshop-crm",
        "loading": dict(store.loading),
    }


# ==================== Run Server ====================

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "workshop.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
