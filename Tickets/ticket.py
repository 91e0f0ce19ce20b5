'''
Ticket model shared by the API, the database layer and the client.
'''
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class Ticket(BaseModel):
    """A booked seat on a bus, as stored in the ``tickets`` table."""

    id: int = Field(frozen=True)
    bus: str
    seat: int
    price: float
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Any) -> "Ticket":
        """
        Build a ticket from a database row mapping.

        Args:
            row: A SQLAlchemy ``RowMapping`` (or any mapping) with the table columns.

        Returns:
            The validated ticket. MySQL ``Decimal`` prices are coerced to float.
        """
        return cls(**dict(row))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "bus": self.bus,
            "seat": self.seat,
            "price": self.price,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
