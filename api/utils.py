from fastapi import HTTPException, status
from logging import Logger
from typing import Literal

# signed 64-bit, the widest integer key either backend can store
MAX_KEY = 2**63 - 1
MIN_KEY = -(2**63)


def _parse_id(id: str, logger: Logger, entity: Literal['ticket'] = 'ticket') -> int:
    """Validate and normalize an integer ticket primary key."""

    try:
        return int(id)
    except ValueError as exc:
        logger.warning(f"Invalid id supplied for {entity}_id", extra={f"{entity}_id": id})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The supplied {entity} id is not a valid integer.",
        ) from exc


def _is_storable_key(key: int) -> bool:
    """Whether ``key`` fits the database's integer column; larger ids cannot match a row."""

    return MIN_KEY <= key <= MAX_KEY


def _driver_message(error: Exception) -> str:
    """Return the raw DB-API error text wrapped by a SQLAlchemy exception."""

    original = getattr(error, "orig", None)
    return str(original) if original is not None else str(error)
