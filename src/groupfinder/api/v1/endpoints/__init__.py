# src/groupfinder/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .communities import router as communities_router
from .submissions import router as submissions_router

__all__ = [
    "admin_router",
    "communities_router",
    "submissions_router",
]
