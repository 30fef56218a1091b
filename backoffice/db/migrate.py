"""Small idempotent schema upgrades for existing SQLite databases."""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Columns a released table gains later, keyed by table then column, e.g.
# {"restaurants": {"tagline": "TEXT"}}. Fresh databases get the full schema from
# ``Base.metadata.create_all``; the current schema is the first release.
ADDITIVE_COLUMNS: dict[str, dict[str, str]] = {}


def _column_names(engine: Engine, table: str) -> set[str]:
    with engine.connect() as conn:
        rows = conn.execute(text(f"PRAGMA table_info({table})")).mappings().all()
    return {row["name"] for row in rows}


def _add_column_sqlite(engine: Engine, table: str, col_def: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def run_migrations(engine: Engine) -> None:
    """Add any missing columns to tables created by older versions."""

    if engine.dialect.name != "sqlite":
        return
    for table, needed in ADDITIVE_COLUMNS.items():
        existing = _column_names(engine, table)
        if not existing:
            continue
        for name, dtype in needed.items():
            if name not in existing:
                logger.info("migration.add_column", extra={"extra_data": {"table": table, "column": name}})
                _add_column_sqlite(engine, table, f"{name} {dtype}")
