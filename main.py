'''
FastAPI application for the Ticket Booking backend.

Available endpoints:
- /: plain-text liveness banner.
- /health: database connectivity probe.
- /tickets: list, book, read and delete tickets.

Every JSON response uses the ``{success, data|message}`` envelope.
'''

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from Database.db import TicketingDB
from Database.deps import get_db
from Database.migrations import apply_pending_migrations

from api.errors import register_exception_handlers
from api.models import MessageResponse
from api.utils import _driver_message

# routers
from api.ticket_routes import ticket_router

logger = logging.getLogger(__name__)

BANNER = "Ticket Booking Backend API is running..."

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    database = TicketingDB()   # create ONCE
    if database.auto_migrate:
        applied = await run_in_threadpool(apply_pending_migrations, database.engine)
        if applied:
            logger.info("Applied migrations: %s", ", ".join(applied))
    app.state.db = database.engine
    yield
    # --- Shutdown ---
    database.dispose()


def _cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Initialize FastAPI app
app = FastAPI(title="Ticket Booking API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(ticket_router, prefix="/tickets", tags=["Tickets"])


@app.get("/", response_class=PlainTextResponse)
async def root():
    return BANNER


@app.get("/health", response_model=MessageResponse)
async def health_check(db: Engine = Depends(get_db)) -> MessageResponse:
    """Quick readiness probe: the database must answer ``SELECT 1``."""

    def ping() -> None:
        with db.connect() as conn:
            conn.execute(text("SELECT 1"))

    try:
        await run_in_threadpool(ping)
    except SQLAlchemyError as exc:
        logger.exception("Health check failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_driver_message(exc),
        ) from exc
    return MessageResponse(success=True, message="Ticket service is healthy")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(levelname)s %(message)s",
    )
    port = int(os.environ.get("PORT", "3000"))
    logger.info("Ticket Booking Backend running on port %s", port)
    uvicorn.run("main:app", host=os.environ.get("HOST", "0.0.0.0"), port=port)
