from __future__ import annotations

import logging

from Database.db import TicketingDB
from Database.migrations import apply_pending_migrations, discover_migrations, migrations_dir_for


LOGGER = logging.getLogger(__name__)


def main() -> None:
    """Entry point that orchestrates configuration loading and migrations."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    database = TicketingDB()
    engine = database.engine
    migrations_dir = migrations_dir_for(engine)
    migrations = discover_migrations(migrations_dir)
    if not migrations:
        LOGGER.info("No migrations found under %s", migrations_dir)
        return

    LOGGER.info("Connecting to %s database.", engine.dialect.name)
    try:
        applied = apply_pending_migrations(engine, migrations)
    finally:
        database.dispose()
    if applied:
        LOGGER.info("Applied migrations: %s", ", ".join(applied))
    else:
        LOGGER.info("Database schema already up to date.")


if __name__ == "__main__":
    main()
