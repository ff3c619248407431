"""User domain models.

SQLModel table definitions for User and EmailAddress.
"""

from enum import Enum

from sqlalchemy import Index, and_
from sqlmodel import Field, SQLModel

from idstore.core.mixins import TimestampMixin


class UserType(str, Enum):
    """Account type.

    - individual: a person; resolvable by email
    - organization: a group account; never resolved by email
    """

    individual = "individual"
    organization = "organization"


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    ``lower_name`` is the stored comparison key that makes names unique
    case-insensitively. ``email`` is stored normalized (stripped and
    lower-cased). ``login_source_id`` is 0 for local password accounts.
    """

    __tablename__: str = "users"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    lower_name: str = Field(index=True, unique=True, max_length=255)
    full_name: str = Field(default="", max_length=255)
    email: str = Field(default="", index=True, max_length=255)
    password_hash: str = Field(default="", max_length=255)
    salt: str = Field(default="", max_length=32)
    login_source_id: int = Field(default=0, index=True)
    login_name: str = Field(default="", max_length=255)
    location: str = Field(default="", max_length=255)
    website: str = Field(default="", max_length=255)
    is_active: bool = Field(default=False)
    type: UserType = Field(default=UserType.individual)

    @property
    def is_local(self) -> bool:
        return self.login_source_id == 0

    @property
    def is_organization(self) -> bool:
        return self.type == UserType.organization


_users = User.__table__  # type: ignore[attr-defined]

# Primary emails are unique only among accounts that can be looked up by
# email: active individual users with a non-empty address.
_ELIGIBLE_PRIMARY_EMAIL = and_(
    _users.c.is_active.is_(True),
    _users.c.type == UserType.individual,
    _users.c.email != "",
)

Index(
    "uq_users_eligible_email",
    _users.c.email,
    unique=True,
    sqlite_where=_ELIGIBLE_PRIMARY_EMAIL,
    postgresql_where=_ELIGIBLE_PRIMARY_EMAIL,
)


class EmailAddress(SQLModel, table=True):
    """Secondary email address of a user.

    Only activated addresses take part in email lookups.
    """

    __tablename__: str = "email_address"

    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", index=True)
    email: str = Field(unique=True, max_length=255)
    is_activated: bool = Field(default=False)
