"""Authentication service.

Resolves a login to a user and verifies the secret either locally or
through the user's login source, provisioning a local account the first
time an external source vouches for an unknown login.

Login source hints:
- ``-1``: use whatever source the matched user has (local if unknown)
- ``0``: local password only
- ``>0``: that external source is authoritative for this attempt
"""

import asyncio
import logging

from idstore.auth.exceptions import (
    BadCredentialsError,
    LoginSourceMismatchError,
    LoginSourceNotActivatedError,
)
from idstore.auth.provider import ExternalAccount
from idstore.auth.sources import LoginSource, LoginSourceRegistry
from idstore.core.exceptions import ProviderError
from idstore.user.models import User
from idstore.user.password import verify_password
from idstore.user.schemas import CreateUserOptions
from idstore.user.store import UsersStore

logger = logging.getLogger(__name__)

ANY_LOGIN_SOURCE = -1
LOCAL_LOGIN_SOURCE = 0


class Authenticator:
    """Authenticate logins against local credentials and login sources.

    Args:
        users: Store used to resolve and provision users
        login_sources: Registry of configured external sources
        provider_timeout: Seconds a provider call may take (None for no limit)
    """

    def __init__(
        self,
        users: UsersStore,
        login_sources: LoginSourceRegistry,
        provider_timeout: float | None = None,
    ):
        self.users = users
        self.login_sources = login_sources
        self.provider_timeout = provider_timeout

    async def authenticate(
        self, login: str, password: str, login_source_id: int = ANY_LOGIN_SOURCE
    ) -> User:
        """Authenticate ``login`` with ``password``.

        Returns:
            The matched user, or the newly provisioned user when an external
            source authenticated a login that had no local account yet

        Raises:
            BadCredentialsError: If the credentials do not verify
            LoginSourceMismatchError: If the user belongs to another source
            LoginSourceNotExistError: If the source id is not configured
            LoginSourceNotActivatedError: If the source is inactive
            ProviderError: If the source is unreachable or times out
            UserAlreadyExistError, EmailAlreadyUsedError, NameNotAllowedError:
                If provisioning a new user conflicts with existing accounts
        """
        user = self.users.find_by_login(login)

        if user is None:
            if login_source_id <= LOCAL_LOGIN_SOURCE:
                raise BadCredentialsError(login=login)
            return await self._provision(login, password, login_source_id)

        if (
            login_source_id != ANY_LOGIN_SOURCE
            and login_source_id != user.login_source_id
        ):
            raise LoginSourceMismatchError(
                actual=user.login_source_id, expect=login_source_id
            )

        if user.is_local:
            if verify_password(password, user.password_hash):
                return user
            raise BadCredentialsError(login=login, userID=user.id)

        source = self._active_source(user.login_source_id)
        try:
            await self._call_provider(source, login, password)
        except BadCredentialsError:
            raise BadCredentialsError(login=login, userID=user.id) from None
        return user

    async def _provision(
        self, login: str, password: str, login_source_id: int
    ) -> User:
        source = self._active_source(login_source_id)
        try:
            account = await self._call_provider(source, login, password)
        except BadCredentialsError:
            raise BadCredentialsError(login=login) from None

        # Store conflicts (including a lost race against a concurrent
        # first sign-in of the same identity) propagate unchanged.
        user = self.users.create(
            account.name or login,
            account.email,
            CreateUserOptions(
                full_name=account.full_name,
                login_source_id=login_source_id,
                login_name=account.login or login,
                location=account.location,
                website=account.website,
                activated=True,
            ),
        )
        logger.info(
            "Provisioned user %s from login source %d",
            user.name,
            login_source_id,
            extra={"user_id": user.id, "login_source_id": login_source_id},
        )
        return user

    def _active_source(self, login_source_id: int) -> LoginSource:
        source = self.login_sources.get_by_id(login_source_id)
        if not source.is_active:
            raise LoginSourceNotActivatedError(id=login_source_id)
        return source

    async def _call_provider(
        self, source: LoginSource, login: str, password: str
    ) -> ExternalAccount:
        try:
            async with asyncio.timeout(self.provider_timeout):
                return await source.provider.authenticate(login, password)
        except TimeoutError as e:
            logger.warning(
                "Login source %d timed out",
                source.id,
                extra={"login_source_id": source.id},
            )
            raise ProviderError(
                "Authentication provider timed out", {"id": source.id}
            ) from e
        except BadCredentialsError:
            logger.info(
                "Login source %d rejected credentials",
                source.id,
                extra={"login_source_id": source.id},
            )
            raise
