# src/groupfinder/main.py
"""Main entry point for the Group Finder application."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from groupfinder.api.v1 import admin_router, communities_router, submissions_router
from groupfinder.core.logging import configure_logging
from groupfinder.core.settings import settings
from groupfinder.services.container import ServiceContainer, build_container

# Initialize FastAPI app
app = FastAPI(
    title="Group Finder API",
    description="Community directory with a reviewed submission workflow",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(submissions_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(communities_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    container = build_container(settings)
    await container.start()
    app.state.container = container


@app.on_event("shutdown")
async def on_shutdown() -> None:
    container: ServiceContainer | None = getattr(app.state, "container", None)
    if container:
        await container.stop()
    app.state.container = None


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint; reports whether the last directory refresh succeeded."""
    container: ServiceContainer | None = getattr(app.state, "container", None)
    directory = "unknown"
    if container is not None:
        directory = "ok" if container.projection.last_refresh_ok else "degraded"
    return {"status": "ok", "directory": directory}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("groupfinder.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
