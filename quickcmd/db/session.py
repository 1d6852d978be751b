"""Synchronous SQLAlchemy engine and session factory for the command store.

SQLite is the default backend. In-memory SQLite URLs get a StaticPool so
every session shares the one connection that holds the data.

Usage:
    engine = create_db_engine(settings.database_url)
    factory = make_session_factory(engine)
    with factory() as session:
        ...
"""

import logging
import re

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quickcmd.db.models import Base

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"))


def create_db_engine(url: str, create_tables: bool = True) -> Engine:
    """Create an engine for ``url`` and, by default, the store's tables."""
    redacted = re.sub(r":[^@/]+@", ":***@", url)
    logger.info("Creating DB engine: %s", redacted)

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(url, pool_pre_ping=True)

    if create_tables:
        Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
