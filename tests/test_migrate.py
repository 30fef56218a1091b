import os
import sys
from pathlib import Path

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from backoffice.db import migrate
from backoffice.db.migrate import run_migrations


def _legacy_engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE restaurants (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"))
        conn.execute(text("INSERT INTO restaurants (name) VALUES ('Bistro')"))
    return engine


def test_run_migrations_adds_missing_columns_once(monkeypatch):
    monkeypatch.setattr(
        migrate,
        "ADDITIVE_COLUMNS",
        {
            "restaurants": {"tagline": "TEXT", "theme": "TEXT DEFAULT 'light' NOT NULL"},
            "missing_table": {"anything": "TEXT"},
        },
    )
    engine = _legacy_engine()

    run_migrations(engine)
    run_migrations(engine)

    columns = {column["name"] for column in inspect(engine).get_columns("restaurants")}
    assert {"tagline", "theme"} <= columns
    with engine.connect() as conn:
        row = conn.execute(text("SELECT tagline, theme FROM restaurants")).one()
    assert tuple(row) == (None, "light")


def test_run_migrations_without_pending_columns_is_a_no_op():
    engine = _legacy_engine()

    run_migrations(engine)

    columns = {column["name"] for column in inspect(engine).get_columns("restaurants")}
    assert columns == {"id", "name"}
