"""HTTP client for the ticket booking API, with the booking-form rules."""

import logging
import os
from typing import Any, Optional

import requests

from Tickets.ticket import Ticket

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"


class ClientError(Exception):
    """Raised when a request fails or the form input is incomplete."""


class TicketClient:
    """Thin wrapper over the REST surface.

    ``session`` may be any object with ``get``/``post``/``delete`` methods
    returning responses that expose ``status_code`` and ``json()``.
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[Any] = None, timeout: float = 10.0):
        self.base_url = (base_url or os.environ.get("TICKET_API_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = getattr(self.session, method)(self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ClientError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise ClientError(message or f"Request failed with status code {response.status_code}")
        return body

    def list_tickets(self) -> list[Ticket]:
        body = self._request("get", "/tickets")
        return [Ticket(**item) for item in body.get("data") or []]

    def get_ticket(self, ticket_id: int) -> Ticket:
        body = self._request("get", f"/tickets/{ticket_id}")
        return Ticket(**body["data"])

    def book_ticket(self, bus: Any, seat: Any, price: Any) -> Ticket:
        """
        Validate the form values and book a ticket.

        Args:
            bus: Bus name.
            seat: Seat number, as typed (string or number).
            price: Price, as typed (string or number).

        Returns:
            The ticket stored by the server.

        Raises:
            ClientError: "Please fill all fields" when any value is empty, or the
                server's message when the booking is rejected.
        """
        if not bus or not seat or not price:
            raise ClientError("Please fill all fields")
        try:
            payload = {"bus": bus, "seat": int(seat), "price": float(price)}
        except (TypeError, ValueError) as exc:
            raise ClientError(f"Seat and price must be numbers: {exc}") from exc

        body = self._request("post", "/tickets", json=payload)
        ticket = Ticket(**body["data"])
        logger.info("Ticket booked", extra={"ticket_id": ticket.id})
        return ticket

    def delete_ticket(self, ticket_id: int) -> str:
        body = self._request("delete", f"/tickets/{ticket_id}")
        return body.get("message", "")


class TicketBoard:
    """Keeps the visible ticket list in step with the server, newest first."""

    def __init__(self, client: TicketClient):
        self.client = client
        self.tickets: list[Ticket] = []
        self.error: Optional[str] = None

    def refresh(self) -> list[Ticket]:
        try:
            self.tickets = self.client.list_tickets()
        except ClientError as exc:
            self.error = str(exc)
        return self.tickets

    def book(self, bus: Any, seat: Any, price: Any) -> Optional[Ticket]:
        self.error = None
        try:
            ticket = self.client.book_ticket(bus, seat, price)
        except ClientError as exc:
            self.error = str(exc)
            return None
        self.tickets.insert(0, ticket)
        return ticket

    def delete(self, ticket_id: int) -> bool:
        try:
            self.client.delete_ticket(ticket_id)
        except ClientError as exc:
            self.error = str(exc)
            return False
        self.tickets = [ticket for ticket in self.tickets if ticket.id != ticket_id]
        return True
