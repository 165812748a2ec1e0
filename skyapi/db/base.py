"""Database engine and session helpers."""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from skyapi.core.config import get_api_settings


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Create the process-wide engine from the configured database URL."""
    return create_engine(
        get_api_settings().database_url,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    """Return the process-wide session factory bound to :func:`get_engine`."""
    return sessionmaker(
        bind=get_engine(),
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        class_=Session,
    )

