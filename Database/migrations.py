"""Plain-SQL schema migrations for the supported database dialects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine


LOGGER = logging.getLogger(__name__)
MIGRATIONS_DIR = Path(__file__).with_name("schema")


def migrations_dir_for(engine: Engine, root: Path = MIGRATIONS_DIR) -> Path:
    """Return the directory holding the migrations for the engine's dialect."""

    return root / engine.dialect.name


def ensure_schema_migrations_table(connection: Connection) -> None:
    """Create the ``schema_migrations`` table when it is missing."""

    connection.exec_driver_sql(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_id VARCHAR(255) PRIMARY KEY,
            applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )


def fetch_applied_migrations(connection: Connection) -> set[str]:
    """Fetch the set of already applied migration identifiers."""

    rows = connection.execute(text("SELECT migration_id FROM schema_migrations"))
    return {row[0] for row in rows}


def discover_migrations(directory: Path) -> Sequence[Path]:
    """Return migration files sorted by filename."""

    return sorted(directory.glob("*.sql"), key=lambda path: path.name)


def split_statements(sql: str) -> list[str]:
    """Split a migration file into individual statements.

    DB-API drivers (``sqlite3`` in particular) execute one statement per call.
    """

    return [statement.strip() for statement in sql.split(";") if statement.strip()]


def run_migration(engine: Engine, migration_path: Path) -> None:
    """Execute a single migration within its own transaction."""

    sql = migration_path.read_text(encoding="utf-8").strip()
    if not sql:
        LOGGER.info("Skipping empty migration %s", migration_path.name)
        return

    with engine.begin() as connection:
        for statement in split_statements(sql):
            connection.exec_driver_sql(statement)
        connection.execute(
            text("INSERT INTO schema_migrations (migration_id) VALUES (:migration_id)"),
            {"migration_id": migration_path.name},
        )


def apply_pending_migrations(engine: Engine, migrations: Iterable[Path] | None = None) -> list[str]:
    """Apply the migrations that have not run yet.

    Args:
        engine: Engine connected to the target database.
        migrations: Iterable of migration file paths. Defaults to the files
            shipped for the engine's dialect.

    Returns:
        List of migration filenames that were newly applied.
    """

    if migrations is None:
        migrations = discover_migrations(migrations_dir_for(engine))

    with engine.begin() as connection:
        ensure_schema_migrations_table(connection)
        applied = fetch_applied_migrations(connection)

    newly_applied: list[str] = []
    for migration in migrations:
        if migration.name in applied:
            LOGGER.info("Migration %s already applied; skipping.", migration.name)
            continue
        LOGGER.info("Applying migration %s", migration.name)
        try:
            run_migration(engine, migration)
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.error("Failed to apply migration %s", migration.name)
            raise RuntimeError(f"Migration {migration.name} failed") from exc
        newly_applied.append(migration.name)
    return newly_applied
