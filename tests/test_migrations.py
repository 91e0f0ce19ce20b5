"""Tests for the plain-SQL migration runner."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect, text

from Database.db import build_engine
from Database.migrations import (
    MIGRATIONS_DIR,
    apply_pending_migrations,
    discover_migrations,
    migrations_dir_for,
    split_statements,
)


def test_every_dialect_ships_the_tickets_table() -> None:
    for dialect in ("sqlite", "mysql"):
        names = [path.name for path in discover_migrations(MIGRATIONS_DIR / dialect)]
        assert "0001_create_tickets.sql" in names


def test_apply_pending_migrations_is_idempotent() -> None:
    engine = build_engine("sqlite:///:memory:")

    first = apply_pending_migrations(engine)
    second = apply_pending_migrations(engine)

    assert first == ["0001_create_tickets.sql"]
    assert second == []
    columns = {column["name"] for column in inspect(engine).get_columns("tickets")}
    assert columns == {"id", "bus", "seat", "price", "created_at"}
    engine.dispose()


def test_migrations_run_in_filename_order(tmp_path: Path) -> None:
    (tmp_path / "0002_add_index.sql").write_text(
        "CREATE INDEX idx_things_name ON things (name);", encoding="utf-8"
    )
    (tmp_path / "0001_things.sql").write_text(
        "CREATE TABLE things (id INTEGER PRIMARY KEY, name TEXT);\n"
        "INSERT INTO things (name) VALUES ('a');",
        encoding="utf-8",
    )
    (tmp_path / "0003_empty.sql").write_text("", encoding="utf-8")
    engine = build_engine("sqlite:///:memory:")

    applied = apply_pending_migrations(engine, discover_migrations(tmp_path))

    assert applied == ["0001_things.sql", "0002_add_index.sql", "0003_empty.sql"]
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM things")).scalar_one() == 1
    engine.dispose()


def test_failing_migration_raises_runtime_error(tmp_path: Path) -> None:
    (tmp_path / "0001_broken.sql").write_text("CREATE TABLE (", encoding="utf-8")
    engine = build_engine("sqlite:///:memory:")

    with pytest.raises(RuntimeError, match="Migration 0001_broken.sql failed"):
        apply_pending_migrations(engine, discover_migrations(tmp_path))
    engine.dispose()


def test_migrations_dir_follows_dialect() -> None:
    engine = build_engine("sqlite:///:memory:")

    assert migrations_dir_for(engine) == MIGRATIONS_DIR / "sqlite"
    engine.dispose()


def test_split_statements_drops_blank_chunks() -> None:
    assert split_statements("SELECT 1;\n\n;SELECT 2;") == ["SELECT 1", "SELECT 2"]
