"""Composition root.

Wires settings, logging, the database engine and the login source
registry into ready-to-use stores and authenticators.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import Engine
from sqlmodel import Session

from idstore.auth.service import Authenticator
from idstore.auth.sources import LoginSourceRegistry, load_login_sources
from idstore.core.logging import configure_logging
from idstore.core.mixins import Clock, utc_now
from idstore.core.settings import Settings, get_settings
from idstore.db.engine import build_engine, init_db
from idstore.user.emails import UserEmailsStore
from idstore.user.store import UsersStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    engine: Engine
    login_sources: LoginSourceRegistry
    now_func: Clock = field(default=utc_now)

    def users(self, session: Session) -> UsersStore:
        return UsersStore(
            session,
            now_func=self.now_func,
            password_rounds=self.settings.password_hash_rounds,
        )

    def emails(self, session: Session) -> UserEmailsStore:
        return UserEmailsStore(session, self.users(session))

    def authenticator(self, session: Session) -> Authenticator:
        return Authenticator(
            self.users(session),
            self.login_sources,
            provider_timeout=self.settings.provider_timeout_seconds,
        )

    async def aclose(self) -> None:
        await self.login_sources.aclose()
        self.engine.dispose()


def bootstrap(
    settings: Settings | None = None, *, setup_logging: bool = True
) -> Services:
    """Build the services for one process.

    Creates missing tables and loads login sources from
    LOGIN_SOURCES_FILE when it is set.
    """
    if setup_logging:
        configure_logging()

    settings = settings or get_settings()
    engine = build_engine(settings)
    init_db(engine)

    if settings.login_sources_file is not None:
        registry = LoginSourceRegistry.from_configs(
            load_login_sources(settings.login_sources_file)
        )
    else:
        registry = LoginSourceRegistry()

    logger.info("Identity store ready (env=%s)", settings.env_name)
    return Services(settings=settings, engine=engine, login_sources=registry)
