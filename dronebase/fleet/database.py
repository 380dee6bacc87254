"""Mini README: Relational storage for the drone fleet.

Structure:
    * Base / DroneRow - declarative mapping of the ``Drones`` table.
    * create_session_factory - engine + sessionmaker for a database URL.

SQLite is the default backend. In-memory SQLite URLs share one connection
across threads so every session sees the same database.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Base = declarative_base()


class DroneRow(Base):
    __tablename__ = "Drones"

    id = Column(Integer, primary_key=True, autoincrement=True)
    status = Column(String, nullable=False, default="")


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in {"sqlite://", "sqlite:///:memory:"}


def create_db_engine(database_url: str) -> Engine:
    """Create an engine, relaxing SQLite's same-thread check for the worker pool."""

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(database_url: str) -> sessionmaker:
    """Return a session factory bound to a freshly initialised database."""

    engine = create_db_engine(database_url)
    Base.metadata.create_all(bind=engine)
    LOGGER.info("Fleet database ready at %s", engine.url.render_as_string(hide_password=True))
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
