'''FastAPI dependencies for database access.'''
from fastapi import Request
from sqlalchemy.engine import Engine


def get_db(request: Request) -> Engine:
    """Return the engine created once at application start-up."""
    return request.app.state.db
