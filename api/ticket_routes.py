"""Ticket-related FastAPI routes."""

import logging
from typing import Any, Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import DateTime, Float, Integer, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from Database.deps import get_db
from Tickets.ticket import Ticket

from .models import MessageResponse, TicketFields, TicketListResponse, TicketResponse
from .utils import _driver_message, _is_storable_key
from .utils import _parse_id as _parse_ticket_id

logger = logging.getLogger(__name__)

TICKET = "ticket"
TICKET_NOT_FOUND = "Ticket not found"

_TYPED_COLUMNS = {"id": Integer, "seat": Integer, "price": Float, "created_at": DateTime}

LIST_TICKETS = text(
    "SELECT id, bus, seat, price, created_at FROM tickets ORDER BY id DESC"
).columns(**_TYPED_COLUMNS)
GET_TICKET = text(
    "SELECT id, bus, seat, price, created_at FROM tickets WHERE id = :id"
).columns(**_TYPED_COLUMNS)
INSERT_TICKET = text("INSERT INTO tickets (bus, seat, price) VALUES (:bus, :seat, :price)")
DELETE_TICKET = text("DELETE FROM tickets WHERE id = :id")

# mount api router
ticket_router = APIRouter()

T = TypeVar("T")


async def _run_query(
    operation: Callable[[], T],
    log_message: str,
    log_context: dict[str, Any],
) -> T:
    """
    Run a blocking database operation off the event loop.

    Args:
        operation: Callable performing the query on its own connection checkout.
        log_message: Message logged when the query fails.
        log_context: Extra context for the log record.

    Returns:
        Whatever ``operation`` returns.

    Raises:
        HTTPException: 500 carrying the driver's error message on failure.
    """

    try:
        return await run_in_threadpool(operation)
    except SQLAlchemyError as exc:
        logger.exception(log_message, extra=log_context)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_driver_message(exc),
        ) from exc


def _select_all(db: Engine) -> list[Ticket]:
    with db.begin() as conn:
        rows = conn.execute(LIST_TICKETS).mappings().all()
    return [Ticket.from_row(row) for row in rows]


def _select_one(db: Engine, ticket_id: int) -> Ticket | None:
    with db.begin() as conn:
        row = conn.execute(GET_TICKET, {"id": ticket_id}).mappings().first()
    return Ticket.from_row(row) if row is not None else None


def _insert(db: Engine, fields: TicketFields) -> Ticket:
    """Insert a ticket and read it back by the generated key on the same connection."""

    with db.begin() as conn:
        result = conn.execute(INSERT_TICKET, fields.to_params())
        row = conn.execute(GET_TICKET, {"id": result.lastrowid}).mappings().one()
    return Ticket.from_row(row)


def _delete(db: Engine, ticket_id: int) -> int:
    with db.begin() as conn:
        result = conn.execute(DELETE_TICKET, {"id": ticket_id})
    return result.rowcount


@ticket_router.get(
    "",
    response_model=TicketListResponse,
    status_code=status.HTTP_200_OK,
)
async def list_tickets(db: Engine = Depends(get_db)) -> TicketListResponse:
    """
    List every ticket, newest first.

    Args:
        db: SQLAlchemy engine injected via dependency.

    Returns:
        TicketListResponse wrapping the tickets (possibly empty).
    """

    tickets = await _run_query(lambda: _select_all(db), "Failed to list tickets", {})
    logger.info("Tickets listed", extra={"count": len(tickets)})
    return TicketListResponse(success=True, data=tickets)


@ticket_router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_200_OK,
)
async def create_ticket(fields: TicketFields, db: Engine = Depends(get_db)) -> TicketResponse:
    """
    Book a ticket.

    Args:
        fields: Bus, seat and price; all three are required.
        db: SQLAlchemy engine injected via dependency.

    Returns:
        TicketResponse wrapping the stored ticket, as read back from the database.
    """

    if not fields.is_complete():
        logger.info("Ticket booking rejected", extra={"payload": fields.model_dump()})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing fields",
        )

    ticket = await _run_query(
        lambda: _insert(db, fields),
        "Failed to insert ticket",
        {"bus": fields.bus, "seat": fields.seat},
    )
    logger.info("Ticket created", extra={"ticket_id": ticket.id, "bus": ticket.bus})
    return TicketResponse(success=True, data=ticket)


@ticket_router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    status_code=status.HTTP_200_OK,
)
async def get_ticket(ticket_id: str, db: Engine = Depends(get_db)) -> TicketResponse:
    """
    Retrieve a single ticket by identifier.

    Args:
        ticket_id: Integer primary key of the ticket (path parameter).
        db: SQLAlchemy engine injected via dependency.

    Returns:
        TicketResponse wrapping the requested ticket.
    """

    key = _parse_ticket_id(ticket_id, logger, TICKET)
    if not _is_storable_key(key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TICKET_NOT_FOUND,
        )

    ticket = await _run_query(
        lambda: _select_one(db, key),
        "Failed to fetch ticket",
        {"ticket_id": ticket_id},
    )
    if ticket is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TICKET_NOT_FOUND,
        )

    logger.info("Ticket retrieved", extra={"ticket_id": ticket_id})
    return TicketResponse(success=True, data=ticket)


@ticket_router.delete(
    "/{ticket_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_ticket(ticket_id: str, db: Engine = Depends(get_db)) -> MessageResponse:
    """
    Delete an existing ticket by identifier.

    Args:
        ticket_id: Integer primary key of the ticket to delete.
        db: SQLAlchemy engine injected via dependency.

    Returns:
        MessageResponse confirming deletion.
    """

    key = _parse_ticket_id(ticket_id, logger, TICKET)
    if not _is_storable_key(key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TICKET_NOT_FOUND,
        )

    deleted = await _run_query(
        lambda: _delete(db, key),
        "Unable to delete ticket",
        {"ticket_id": ticket_id},
    )
    if deleted == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=TICKET_NOT_FOUND,
        )

    logger.info("Ticket deleted", extra={"ticket_id": ticket_id})
    return MessageResponse(success=True, message="Ticket deleted")
