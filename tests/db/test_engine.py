"""Tests for idstore/db/engine.py - engine and session management."""

import contextlib

from sqlalchemy import inspect, text
from sqlmodel import Session

from idstore.core.settings import Settings
from idstore.db.engine import build_engine, init_db, session_factory


def _settings() -> Settings:
    return Settings(_env_file=None, DATABASE_URL="sqlite://")


def test_init_db_creates_tables():
    engine = build_engine(_settings())
    init_db(engine)

    tables = set(inspect(engine).get_table_names())

    assert {"users", "email_address"} <= tables


def test_sqlite_foreign_keys_enabled():
    engine = build_engine(_settings())

    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_session_factory_yields_session():
    get_session = session_factory(build_engine(_settings()))
    gen = get_session()
    session = next(gen)

    assert isinstance(session, Session)

    with contextlib.suppress(StopIteration):
        next(gen)
