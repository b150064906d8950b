# app/database.py
from collections.abc import Callable

from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine
#
# - check_same_thread=False: SQLite connections are handed between the
#   threadpool workers FastAPI runs sync endpoints on
# - pool_pre_ping=True: validate connections before using them
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

connect_args: dict = {}
if db_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    db_url,
    echo=settings.DB_ECHO,  # set DB_ECHO=true to debug SQL queries
    pool_pre_ping=True,
    connect_args=connect_args,
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


def session_factory() -> Session:
    """Open a new Session bound to the application engine."""
    return Session(engine)


def get_session_factory() -> Callable[[], Session]:
    """
    FastAPI dependency returning a Session factory.

    Used by code that opens its own transactions (checkout), as opposed to
    borrowing the request-scoped session from `get_session`.
    """
    return session_factory
