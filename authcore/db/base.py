from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from authcore.core.config import normalize_database_url

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create the process-wide engine. SQLite URLs get thread sharing enabled."""
    url = normalize_database_url(database_url)
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
