"""Shared API request and response models for the Ticket Booking service."""

from typing import Optional

from pydantic import BaseModel, Field

from Tickets.ticket import Ticket


class TicketFields(BaseModel):
    """Payload accepted when booking a ticket.

    Every field is optional at the schema level so that an incomplete form is
    reported as ``Missing fields`` rather than as a type error.
    """

    bus: Optional[str] = None
    seat: Optional[int] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)

    def is_complete(self) -> bool:
        """Whether every field carries a truthy value (``""`` and ``0`` count as missing)."""
        return bool(self.bus and self.seat and self.price)

    def to_params(self) -> dict[str, str | int | float | None]:
        return {"bus": self.bus, "seat": self.seat, "price": self.price}


class MessageResponse(BaseModel):
    """Envelope for simple string responses."""

    success: bool
    message: str


class TicketResponse(BaseModel):
    """Envelope for responses that include a ticket resource."""

    success: bool
    data: Ticket


class TicketListResponse(BaseModel):
    """Envelope for responses that include a list of tickets."""

    success: bool
    data: list[Ticket]
