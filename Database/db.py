'''
This file contains the database configuration for the Ticket Booking service.

The backend runs on either SQLite (default) or MySQL. A full SQLAlchemy URL in
``DATABASE_URL`` takes precedence over the individual ``DB_*`` variables.
'''
import logging
import os
from typing import Any, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

SUPPORTED_CLIENTS = ("sqlite", "mysql")


def _to_bool(val: Optional[str], default: bool = False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _to_int(val: Optional[str], default: int) -> int:
    try:
        return int(val) if val is not None else default
    except ValueError:
        return default


def build_database_url() -> str | URL:
    """Build the SQLAlchemy URL from environment variables.

    Returns:
        ``DATABASE_URL`` verbatim when set, otherwise a SQLite or MySQL URL
        assembled from ``DB_CLIENT`` and the matching ``DB_*`` variables.

    Raises:
        ValueError: If ``DB_CLIENT`` names an unsupported backend.
    """

    explicit: Optional[str] = os.environ.get("DATABASE_URL")
    if explicit:
        return explicit

    client = os.environ.get("DB_CLIENT", "sqlite").strip().lower()
    if client not in SUPPORTED_CLIENTS:
        raise ValueError(f"Unsupported DB_CLIENT {client!r}; expected one of {SUPPORTED_CLIENTS}.")

    if client == "sqlite":
        return URL.create("sqlite", database=os.environ.get("DB_PATH", "tickets.db"))

    return URL.create(
        "mysql+pymysql",
        username=os.environ.get("DB_USER", "ticketuser"),
        password=os.environ.get("DB_PASSWORD", "ticketpass123"),
        host=os.environ.get("DB_HOST", "mysql"),
        port=_to_int(os.environ.get("DB_PORT"), 3306),
        database=os.environ.get("DB_NAME", "ticket_db"),
    )


def build_engine(url: str | URL, pool_size: int = 10) -> Engine:
    """Create an engine with pool settings suited to the URL's dialect.

    An in-memory SQLite database only lives as long as its connection, so it
    gets a single shared connection instead of a pool.
    """

    options: dict[str, Any] = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
    else:
        options.update(pool_pre_ping=True, pool_recycle=180, pool_size=pool_size, max_overflow=0)
    return create_engine(url, **options)


class TicketingDB:
    """Database Client"""

    # private interface
    def __init__(self):
        load_dotenv()
        url = build_database_url()
        self.auto_migrate: bool = _to_bool(os.environ.get("DB_AUTO_MIGRATE"), True)
        self.engine: Engine = build_engine(url, pool_size=_to_int(os.environ.get("DB_POOL_SIZE"), 10))
        logger.info("Database engine created", extra={"dialect": self.engine.dialect.name})

    def dispose(self) -> None:
        self.engine.dispose()
