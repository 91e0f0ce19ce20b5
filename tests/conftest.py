"""Shared fixtures: an in-memory SQLite database with the schema applied."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from Database.db import build_engine  # noqa: E402
from Database.deps import get_db  # noqa: E402
from Database.migrations import apply_pending_migrations  # noqa: E402
from api.errors import register_exception_handlers  # noqa: E402
from api.ticket_routes import ticket_router  # noqa: E402


def build_app(engine: Engine) -> FastAPI:
    """Mount the ticket router on a bare app bound to ``engine``."""

    app = FastAPI()
    app.dependency_overrides[get_db] = lambda: engine  # type: ignore[assignment]
    register_exception_handlers(app)
    app.include_router(ticket_router, prefix="/tickets")
    return app


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = build_engine("sqlite:///:memory:")
    apply_pending_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def client(engine: Engine) -> TestClient:
    """Create a TestClient with the database dependency overridden."""

    return TestClient(build_app(engine))
