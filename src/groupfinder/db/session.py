"""Database session configuration."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from groupfinder.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Import the models so Base.metadata is populated for migrations.
import groupfinder.models  # noqa: E402,F401

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

