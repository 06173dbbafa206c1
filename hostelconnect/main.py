"""HostelConnect: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hostelconnect.api.v1.admin import router as admin_router
from hostelconnect.api.v1.auth import router as auth_router
from hostelconnect.api.v1.bookings import router as bookings_router
from hostelconnect.api.v1.chat import router as chat_router
from hostelconnect.api.v1.dashboards import router as dashboards_router
from hostelconnect.api.v1.hostels import router as hostels_router
from hostelconnect.api.v1.navigation import router as navigation_router
from hostelconnect.api.v1.notifications import router as notifications_router
from hostelconnect.config import settings
from hostelconnect.errors import register_exception_handlers

# Configure root logger so all hostelconnect.* loggers output to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    yield
    # Shutdown: dispose engine connections
    from hostelconnect.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Student hostel marketplace near Kirinyaga University: listings, booking requests and an assistant.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(hostels_router)
app.include_router(bookings_router)
app.include_router(dashboards_router)
app.include_router(navigation_router)
app.include_router(notifications_router)
app.include_router(admin_router)
app.include_router(chat_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
