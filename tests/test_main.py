"""Tests for idstore/main.py - composition root."""

import json

import pytest
from sqlmodel import Session

from idstore.auth.sources import LoginSourceRegistry
from idstore.core.settings import Settings
from idstore.main import bootstrap
from idstore.user.schemas import CreateUserOptions


@pytest.mark.asyncio
async def test_bootstrap_without_login_sources():
    services = bootstrap(
        Settings(_env_file=None, DATABASE_URL="sqlite://"), setup_logging=False
    )
    try:
        assert isinstance(services.login_sources, LoginSourceRegistry)
        assert services.login_sources.list_sources() == []
    finally:
        await services.aclose()


@pytest.mark.asyncio
async def test_bootstrap_loads_login_sources(tmp_path):
    path = tmp_path / "sources.json"
    path.write_text(
        json.dumps([{"id": 3, "name": "GitHub", "type": "github"}]), encoding="utf-8"
    )

    services = bootstrap(
        Settings(_env_file=None, DATABASE_URL="sqlite://", LOGIN_SOURCES_FILE=str(path)),
        setup_logging=False,
    )
    try:
        assert services.login_sources.get_by_id(3).name == "GitHub"
    finally:
        await services.aclose()


@pytest.mark.asyncio
async def test_services_share_configuration(tmp_path):
    db = tmp_path / "idstore.db"
    services = bootstrap(
        Settings(
            _env_file=None,
            DATABASE_URL=f"sqlite:///{db}",
            PASSWORD_HASH_ROUNDS=4,
        ),
        setup_logging=False,
    )
    try:
        with Session(services.engine) as session:
            users = services.users(session)
            users.create(
                "alice",
                "alice@example.com",
                CreateUserOptions(password="pa$$word", activated=True),
            )
            services.emails(session).create(
                users.get_by_username("alice").id, "a.smith@example.com", activated=True
            )
            authenticator = services.authenticator(session)
            user = await authenticator.authenticate("a.smith@example.com", "pa$$word")

        assert user.name == "alice"
        assert authenticator.provider_timeout == 10.0
    finally:
        await services.aclose()
