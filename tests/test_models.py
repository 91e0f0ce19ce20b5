"""Tests for the pydantic models shared by the API, client and notifier."""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from api.models import TicketFields
from api.utils import _is_storable_key
from Notifications.notification import TestResults
from Tickets.ticket import Ticket


def test_ticket_from_row_coerces_decimal_price() -> None:
    """MySQL returns DECIMAL columns as Decimal; the model exposes a float."""
    created_at = datetime(2024, 1, 1, 10, 30)
    ticket = Ticket.from_row(
        {"id": 1, "bus": "RITCO", "seat": 12, "price": Decimal("5000.50"), "created_at": created_at}
    )

    assert ticket.price == 5000.5
    assert isinstance(ticket.price, float)
    assert ticket.to_dict()["created_at"] == "2024-01-01T10:30:00"


def test_ticket_id_is_frozen() -> None:
    ticket = Ticket(id=3, bus="KBS", seat=1, price=10)

    with pytest.raises(ValidationError):
        ticket.id = 4


def test_ticket_fields_complete_only_with_truthy_values() -> None:
    assert TicketFields(bus="RITCO", seat=12, price=5000).is_complete()
    assert not TicketFields(bus="RITCO").is_complete()
    assert not TicketFields(bus="", seat=1, price=1).is_complete()
    assert not TicketFields(bus="RITCO", seat=0, price=1).is_complete()
    assert not TicketFields(bus="RITCO", seat=1, price=0).is_complete()


def test_ticket_fields_coerce_numeric_strings() -> None:
    fields = TicketFields(bus="RITCO", seat="12", price="5000.50")

    assert fields.to_params() == {"bus": "RITCO", "seat": 12, "price": 5000.5}


def test_ticket_fields_reject_non_numeric_price() -> None:
    with pytest.raises(ValidationError):
        TicketFields(bus="RITCO", seat=1, price="cheap")


def test_test_results_accepts_camel_case_commit_hash() -> None:
    results = TestResults.model_validate(
        {"passed": 10, "failed": 0, "total": 10, "commitHash": "abcdef123456"}
    )

    assert results.commit_hash == "abcdef123456"
    assert results.succeeded
    assert results.coverage_label() == "N/A"


def test_test_results_coverage_label() -> None:
    assert TestResults(passed=1, failed=1, total=2, coverage=85.5).coverage_label() == "85.5%"
    assert TestResults(passed=1, failed=1, total=2, coverage=80).coverage_label() == "80%"


def test_ticket_fields_reject_non_finite_price() -> None:
    for value in (float("inf"), float("-inf"), float("nan")):
        with pytest.raises(ValidationError):
            TicketFields(bus="RITCO", seat=1, price=value)


def test_storable_key_bounds() -> None:
    assert _is_storable_key(2**63 - 1)
    assert _is_storable_key(-(2**63))
    assert not _is_storable_key(2**63)
    assert not _is_storable_key(-(2**63) - 1)


def test_test_results_keep_unknown_keys() -> None:
    results = TestResults.model_validate(
        {"passed": 1, "failed": 0, "total": 1, "duration": 12.5, "suite": "unit"}
    )

    dumped = results.model_dump(by_alias=True, exclude_none=True)
    assert dumped["duration"] == 12.5
    assert dumped["suite"] == "unit"
