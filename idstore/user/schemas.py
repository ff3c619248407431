"""User domain schemas.

Input schemas for store operations.
"""

from sqlmodel import Field, SQLModel


class CreateUserOptions(SQLModel):
    """Optional attributes for a new user.

    An empty ``password`` stores no local secret; accounts delegated to
    an external login source are created this way.
    """

    password: str = ""
    full_name: str = Field(default="", max_length=255)
    login_source_id: int = Field(default=0, ge=0)
    login_name: str = Field(default="", max_length=255)
    location: str = Field(default="", max_length=255)
    website: str = Field(default="", max_length=255)
    activated: bool = False
