import inspect
from datetime import UTC, datetime

import anyio
import pytest
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from idstore.auth.exceptions import BadCredentialsError
from idstore.auth.provider import ExternalAccount
from idstore.auth.service import Authenticator
from idstore.auth.sources import LoginSource, LoginSourceRegistry
from idstore.user.emails import UserEmailsStore
from idstore.user.models import EmailAddress, User  # noqa: F401
from idstore.user.store import UsersStore

FIXED_NOW = datetime(2026, 1, 19, 12, 34, 56, tzinfo=UTC)
TEST_ROUNDS = 4


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


class FakeProvider:
    """In-memory provider that accepts one secret and reports a fixed account."""

    def __init__(
        self,
        account: ExternalAccount | None = None,
        password: str | None = None,
        error: Exception | None = None,
    ):
        self.account = account or ExternalAccount()
        self.password = password
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def authenticate(self, login: str, password: str) -> ExternalAccount:
        self.calls.append((login, password))
        if self.error is not None:
            raise self.error
        if self.password is not None and password != self.password:
            raise BadCredentialsError(login=login)
        return self.account

    async def aclose(self) -> None:
        self.closed = True


def make_registry(
    provider: FakeProvider, source_id: int = 1, is_active: bool = True
) -> LoginSourceRegistry:
    return LoginSourceRegistry(
        [
            LoginSource(
                id=source_id, name="test", is_active=is_active, provider=provider
            )
        ]
    )


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="users")
def users_fixture(session: Session) -> UsersStore:
    return UsersStore(
        session, now_func=lambda: FIXED_NOW, password_rounds=TEST_ROUNDS
    )


@pytest.fixture(name="emails")
def emails_fixture(session: Session, users: UsersStore) -> UserEmailsStore:
    return UserEmailsStore(session, users)


@pytest.fixture(name="provider")
def provider_fixture() -> FakeProvider:
    return FakeProvider()


@pytest.fixture(name="authenticator")
def authenticator_fixture(users: UsersStore, provider: FakeProvider) -> Authenticator:
    return Authenticator(users, make_registry(provider), provider_timeout=5.0)


@pytest.fixture(name="make_provider")
def make_provider_fixture():
    """Factory for fake providers with a given account, secret or error."""
    return FakeProvider


@pytest.fixture(name="make_authenticator")
def make_authenticator_fixture(users: UsersStore):
    """Factory for authenticators backed by a single fake login source."""

    def _make(
        provider: FakeProvider,
        source_id: int = 1,
        is_active: bool = True,
        provider_timeout: float | None = 5.0,
    ) -> Authenticator:
        return Authenticator(
            users,
            make_registry(provider, source_id=source_id, is_active=is_active),
            provider_timeout=provider_timeout,
        )

    return _make
