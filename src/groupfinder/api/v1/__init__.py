# src/groupfinder/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import admin_router, communities_router, submissions_router

__all__ = [
    "admin_router",
    "communities_router",
    "submissions_router",
]
