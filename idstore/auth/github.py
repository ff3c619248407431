"""GitHub login source.

Authenticates a GitHub (or GitHub Enterprise) login with a personal
access token by fetching the authenticated user from the REST API.
"""

import logging

import httpx

from idstore.auth.exceptions import BadCredentialsError
from idstore.auth.provider import ExternalAccount
from idstore.core.exceptions import ProviderError
from idstore.core.http import create_http_client
from idstore.core.retry import with_retry

logger = logging.getLogger(__name__)

GITHUB_API_ENDPOINT = "https://api.github.com/"


class GitHubProvider:
    def __init__(
        self,
        api_endpoint: str = GITHUB_API_ENDPOINT,
        skip_verify: bool = False,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or create_http_client(
            base_url=api_endpoint, verify=not skip_verify
        )

    async def authenticate(self, login: str, password: str) -> ExternalAccount:
        """Verify ``password`` as a token for ``login``.

        Raises:
            BadCredentialsError: If GitHub rejects the token
            ProviderError: If GitHub is unreachable or answers unexpectedly
        """

        async def do_request() -> httpx.Response:
            return await self._client.get(
                "user",
                auth=httpx.BasicAuth(login, password),
                headers={"Accept": "application/vnd.github+json"},
            )

        try:
            response = await with_retry(do_request)
        except httpx.RequestError as e:
            raise ProviderError("Authentication provider unavailable") from e

        if response.status_code in {401, 403}:
            logger.info(
                "GitHub rejected credentials: status=%s",
                response.status_code,
                extra={"status_code": response.status_code},
            )
            raise BadCredentialsError(login=login)
        if response.status_code != 200:
            raise ProviderError(
                f"Authentication failed: unexpected status {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError() from e
        if not isinstance(data, dict):
            raise ProviderError()

        return ExternalAccount(
            login=login,
            name=login,
            full_name=data.get("name") or "",
            email=data.get("email") or "",
            location=data.get("location") or "",
            website=data.get("blog") or "",
        )

    async def aclose(self) -> None:
        await self._client.aclose()
