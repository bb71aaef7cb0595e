"""
A la carte - FastAPI Backend
Main application entry point: catalog, private ratings and sharing.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from config import settings, validate_security_settings
from database import engine, Base
import models  # noqa: F401
from routers import (
    health,
    auth,
    profile,
    users,
    catalog,
    ratings,
    stats,
    admin,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting A la carte API...")
    validate_security_settings()
    if not settings.GOOGLE_CLIENT_ID:
        print("⚠️ GOOGLE_CLIENT_ID is not configured; Google sign-in will be rejected.")
    if settings.AUTO_CREATE_DB_SCHEMA:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            print("🗄️ Database schema verified.")
        except Exception as e:
            print(f"⚠️ Database bootstrap skipped: {e}")
    if settings.INITIAL_ADMIN_EMAIL:
        print("👑 Initial admin email configured.")
    yield
    # Shutdown
    await engine.dispose()
    print("👋 Shutting down API...")


app = FastAPI(
    title="A la carte API",
    description="Rate cheeses, wines, gins, coffees and chili sauces, privately or with chosen friends",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(users.router, prefix="/api", tags=["Users"])
for tag, catalog_router in catalog.CATALOG_ROUTERS.items():
    app.include_router(catalog_router, prefix=f"/api/{tag}", tags=["Catalog"])
app.include_router(ratings.router, prefix="/api/rating", tags=["Ratings"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "A la carte API",
        "version": "0.1.0",
        "status": "running"
    }
