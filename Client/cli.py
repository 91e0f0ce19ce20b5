"""Command-line front end for the ticket booking API.

Usage::

    python -m Client.cli list
    python -m Client.cli book --bus RITCO --seat 12 --price 5000
    python -m Client.cli show 3
    python -m Client.cli delete 3
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence, TextIO

from dotenv import load_dotenv

from Tickets.ticket import Ticket

from .client import ClientError, TicketBoard, TicketClient


def format_ticket(ticket: Ticket) -> str:
    return f"#{ticket.id} {ticket.bus}\n  Seat: {ticket.seat}\n  Price: {ticket.price:g}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tickets", description="Book and manage bus tickets.")
    parser.add_argument("--url", help="API base URL (defaults to $TICKET_API_URL)")
    parser.add_argument("--json", action="store_true", help="print raw JSON instead of text")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="list tickets, newest first")

    book = commands.add_parser("book", help="book a ticket")
    book.add_argument("--bus", default="")
    book.add_argument("--seat", default="")
    book.add_argument("--price", default="")

    show = commands.add_parser("show", help="show one ticket")
    show.add_argument("ticket_id", type=int)

    delete = commands.add_parser("delete", help="delete a ticket")
    delete.add_argument("ticket_id", type=int)
    return parser


def _emit(tickets: list[Ticket], as_json: bool, out: TextIO) -> None:
    if as_json:
        out.write(json.dumps([ticket.to_dict() for ticket in tickets], indent=2) + "\n")
        return
    if not tickets:
        out.write("No tickets booked.\n")
    for ticket in tickets:
        out.write(format_ticket(ticket) + "\n")


def main(
    argv: Optional[Sequence[str]] = None,
    client: Optional[TicketClient] = None,
    out: TextIO = sys.stdout,
) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
    load_dotenv()

    board = TicketBoard(client or TicketClient(args.url))
    if args.command == "list":
        board.refresh()
        if board.error is None:
            _emit(board.tickets, args.json, out)
    elif args.command == "book":
        ticket = board.book(args.bus, args.seat, args.price)
        if ticket is not None:
            _emit([ticket], args.json, out)
    elif args.command == "show":
        try:
            _emit([board.client.get_ticket(args.ticket_id)], args.json, out)
        except ClientError as exc:
            board.error = str(exc)
    elif args.command == "delete":
        if board.delete(args.ticket_id):
            out.write(f"Ticket {args.ticket_id} deleted\n")

    if board.error:
        sys.stderr.write(f"Error: {board.error}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
