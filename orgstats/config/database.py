"""SQLAlchemy engine, session factory and schema bootstrap"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from orgstats.config.settings import settings

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, future=True)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = build_session_factory(engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create tables if they don't exist. There is no migration tracking."""
    # Register models on Base.metadata
    import orgstats.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
