"""Login source configuration and registry.

Login sources are read-only configuration here: they are loaded once
(typically from a JSON file named by LOGIN_SOURCES_FILE), turned into
providers, and handed to the authenticator as an explicit registry.

Example file:
    [
        {"id": 1, "name": "Company Firebase", "type": "firebase",
         "api_key": "..."},
        {"id": 2, "name": "GitHub", "type": "github", "is_active": false}
    ]
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Literal

import pydantic
from pydantic import BaseModel, Field, TypeAdapter

from idstore.auth.exceptions import LoginSourceNotExistError
from idstore.auth.firebase import FirebaseProvider
from idstore.auth.github import GITHUB_API_ENDPOINT, GitHubProvider
from idstore.auth.identity_toolkit import IDENTITY_TOOLKIT_BASE_URL
from idstore.auth.provider import Provider
from idstore.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class LoginSourceConfigBase(BaseModel):
    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    is_active: bool = True


class FirebaseSourceConfig(LoginSourceConfigBase):
    type: Literal["firebase"]
    api_key: str = Field(min_length=1)
    base_url: str = IDENTITY_TOOLKIT_BASE_URL
    tenant_id: str | None = None


class GitHubSourceConfig(LoginSourceConfigBase):
    type: Literal["github"]
    api_endpoint: str = GITHUB_API_ENDPOINT
    skip_verify: bool = False


LoginSourceConfig = Annotated[
    FirebaseSourceConfig | GitHubSourceConfig, Field(discriminator="type")
]

_configs_adapter = TypeAdapter(list[LoginSourceConfig])


@dataclass(frozen=True)
class LoginSource:
    """A configured external authentication source.

    ``provider`` is only consulted while ``is_active`` is true.
    """

    id: int
    name: str
    is_active: bool
    provider: Provider


def build_provider(config: LoginSourceConfig) -> Provider:
    match config:
        case FirebaseSourceConfig():
            return FirebaseProvider(
                api_key=config.api_key,
                base_url=config.base_url,
                tenant_id=config.tenant_id,
            )
        case GitHubSourceConfig():
            return GitHubProvider(
                api_endpoint=config.api_endpoint, skip_verify=config.skip_verify
            )
    raise ConfigurationError(
        "Unsupported login source type", {"type": getattr(config, "type", None)}
    )


def load_login_sources(path: Path) -> list[LoginSourceConfig]:
    """Parse and validate a JSON file of login source configurations.

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            "Login sources file is unreadable", {"path": str(path)}
        ) from e

    try:
        return _configs_adapter.validate_json(raw)
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            "Login sources file is invalid",
            {"path": str(path), "errors": e.error_count()},
        ) from e


class LoginSourceRegistry:
    """Lookup of configured login sources by id."""

    def __init__(self, sources: Iterable[LoginSource] = ()):
        self._sources: dict[int, LoginSource] = {}
        for source in sources:
            if source.id <= 0:
                raise ConfigurationError(
                    "Login source ids must be positive", {"id": source.id}
                )
            if source.id in self._sources:
                raise ConfigurationError(
                    "Duplicate login source id", {"id": source.id}
                )
            self._sources[source.id] = source

    @classmethod
    def from_configs(cls, configs: Iterable[LoginSourceConfig]) -> "LoginSourceRegistry":
        sources = [
            LoginSource(
                id=config.id,
                name=config.name,
                is_active=config.is_active,
                provider=build_provider(config),
            )
            for config in configs
        ]
        logger.info("Loaded %d login source(s)", len(sources))
        return cls(sources)

    def get_by_id(self, source_id: int) -> LoginSource:
        """Get a login source by id.

        Raises:
            LoginSourceNotExistError: If no source has this id
        """
        try:
            return self._sources[source_id]
        except KeyError:
            raise LoginSourceNotExistError(id=source_id) from None

    def list_sources(self) -> list[LoginSource]:
        return sorted(self._sources.values(), key=lambda s: s.id)

    async def aclose(self) -> None:
        """Close provider resources (HTTP clients)."""
        for source in self._sources.values():
            await source.provider.aclose()
