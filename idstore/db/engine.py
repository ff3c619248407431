from collections.abc import Generator

from sqlalchemy import Engine, event
from sqlmodel import Session, SQLModel, create_engine

from idstore.core.settings import Settings


def build_engine(settings: Settings) -> Engine:
    connect_args: dict[str, object] = {}
    if settings.is_sqlite:
        # Required for SQLite when sessions are used across threads.
        connect_args = {"check_same_thread": False}

    engine = create_engine(
        settings.database_url, echo=settings.database_echo, connect_args=connect_args
    )
    if settings.is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(engine: Engine) -> None:
    """Create all tables registered on SQLModel metadata."""
    # Import table models so SQLModel registers them in metadata.
    import idstore.user.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def session_factory(engine: Engine):
    def get_session() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    return get_session
