"""Reusable model mixins and the store clock.

Provides common field patterns for SQLModel table definitions.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import text
from sqlmodel import Field

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return current UTC time without microseconds."""
    return datetime.now(UTC).replace(microsecond=0)


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps.

    Stores set both columns explicitly from their clock so tests can
    substitute a fixed time; the defaults only cover rows inserted
    outside a store.

    Usage:
        class MyModel(TimestampMixin, SQLModel, table=True):
            id: int = Field(primary_key=True)
            name: str
    """

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
