"""Firebase login source.

Verifies email/password credentials with the Identity Toolkit REST API
(the same backend Firebase Authentication uses) and reports the account
it signed in.
"""

import logging
import re

import httpx

from idstore.auth.exceptions import BadCredentialsError
from idstore.auth.identity_toolkit import (
    IDENTITY_TOOLKIT_BASE_URL,
    IDENTITY_TOOLKIT_ENDPOINTS,
    INVALID_CREDENTIALS_MESSAGES,
    ErrorResponse,
    SignInWithPasswordRequest,
    SignInWithPasswordResponse,
)
from idstore.auth.provider import ExternalAccount
from idstore.core.exceptions import ProviderError
from idstore.core.http import create_http_client
from idstore.core.retry import with_retry

logger = logging.getLogger(__name__)


class FirebaseProvider:
    """Provider backed by Firebase Authentication email/password sign-in."""

    def __init__(
        self,
        api_key: str,
        base_url: str = IDENTITY_TOOLKIT_BASE_URL,
        tenant_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._tenant_id = tenant_id
        self._client = client or create_http_client(
            base_url=base_url,
            max_connections=100,
            max_keepalive_connections=20,
        )

    async def authenticate(self, login: str, password: str) -> ExternalAccount:
        """Sign in with email/password.

        Raises:
            BadCredentialsError: If Firebase rejects the credentials
            ProviderError: If Firebase is unreachable or answers unexpectedly
        """
        payload: SignInWithPasswordRequest = {
            "email": login,
            "password": password,
            "returnSecureToken": True,
        }
        if self._tenant_id:
            payload["tenantId"] = self._tenant_id

        response = await self._request(
            IDENTITY_TOOLKIT_ENDPOINTS["signInWithPassword"], payload
        )
        if response.status_code != 200:
            self._handle_error(response, login)

        try:
            data: SignInWithPasswordResponse = response.json()
        except ValueError as e:
            raise ProviderError() from e
        if not isinstance(data, dict):
            raise ProviderError()

        if not data.get("localId"):
            raise BadCredentialsError(login=login)

        email = data.get("email") or login
        return ExternalAccount(
            login=login,
            name=email.split("@", 1)[0],
            full_name=data.get("displayName") or "",
            email=email,
        )

    async def _request(
        self, endpoint: str, payload: SignInWithPasswordRequest
    ) -> httpx.Response:
        async def do_request() -> httpx.Response:
            return await self._client.post(
                f"/{endpoint}", params={"key": self._api_key}, json=payload
            )

        try:
            return await with_retry(do_request)
        except httpx.RequestError as e:
            raise ProviderError("Authentication provider unavailable") from e

    @staticmethod
    def _sanitize_error_code(error_message: str) -> str:
        """Extract a safe, non-sensitive error code for logging."""
        match = re.match(r"[A-Z0-9_]+", error_message)
        return match.group(0) if match else "UNKNOWN"

    def _handle_error(self, response: httpx.Response, login: str) -> None:
        try:
            body: ErrorResponse = response.json()
        except ValueError as e:
            raise ProviderError() from e

        if not isinstance(body, dict):
            raise ProviderError()
        error = body.get("error")
        if not isinstance(error, dict):
            error = {}
        error_message = str(error.get("message", "UNKNOWN"))

        error_code = self._sanitize_error_code(error_message)
        logger.info(
            "Identity Toolkit error: status=%s, code=%s",
            response.status_code,
            error_code,
            extra={"status_code": response.status_code, "error_code": error_code},
        )

        if response.status_code == 429 or error_code == "TOO_MANY_ATTEMPTS_TRY_LATER":
            raise ProviderError("Authentication provider is rate limiting requests")

        if error_code in INVALID_CREDENTIALS_MESSAGES:
            raise BadCredentialsError(login=login)

        if response.status_code in {400, 401, 403}:
            raise BadCredentialsError(login=login)

        raise ProviderError(f"Authentication failed: {error_code}")

    async def aclose(self) -> None:
        await self._client.aclose()
