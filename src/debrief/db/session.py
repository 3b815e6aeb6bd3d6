"""SQLAlchemy engine and session factory."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from debrief.core.config import settings


def build_engine(database_url: str | None = None, *, echo: bool | None = None) -> Engine:
    url = database_url or settings.database_url
    connect_args = (
        {"check_same_thread": False} if url.startswith("sqlite") else {}
    )
    return create_engine(
        url,
        echo=settings.debug if echo is None else echo,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory; each store call opens and closes its own session."""
    return sessionmaker(bind=engine, expire_on_commit=False)
