"""Login source provider capability.

A provider verifies a login and secret against an external system and
describes the external account on success.
"""

from typing import Protocol

from pydantic import BaseModel


class ExternalAccount(BaseModel):
    """Account details reported by a provider after a successful sign-in.

    ``name`` and ``email`` seed a new local user when the login is not
    known yet; an empty ``name`` falls back to the login itself.
    """

    login: str = ""
    name: str = ""
    full_name: str = ""
    email: str = ""
    location: str = ""
    website: str = ""


class Provider(Protocol):
    """Protocol for external authentication providers.

    Enables dependency inversion - the authenticator depends on this
    protocol, not on any concrete provider.
    """

    async def authenticate(self, login: str, password: str) -> ExternalAccount:
        """Verify credentials with the external system.

        Raises:
            BadCredentialsError: If the external system rejects the credentials
            ProviderError: If the external system is unavailable
        """
        ...

    async def aclose(self) -> None:
        """Release resources held by the provider."""
        ...
