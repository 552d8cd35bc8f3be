# movie_catalog/database.py
import math
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine, Session

from movie_catalog.core.config import settings
from movie_catalog.core.errors import StoreError

def connect_args_for(url: str, timeout: float) -> dict:
    """
    Driver options that bound how long a single database call may take.
    """
    if url.startswith("sqlite"):
        # request handlers run in a threadpool, so the connection crosses threads
        return {"check_same_thread": False, "timeout": timeout}
    if url.startswith("postgresql"):
        # libpq options, understood by both psycopg2 and psycopg
        return {
            "connect_timeout": max(1, math.ceil(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return {}

def build_engine(
    url: str,
    echo: bool = False,
    timeout: float = settings.DB_TIMEOUT_SECONDS,
) -> Engine:
    """
    One engine per process; every request session borrows from its pool.
    """
    connect_args = connect_args_for(url, timeout)
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args=connect_args)
    return create_engine(
        url,
        echo=echo,
        connect_args=connect_args,
        pool_pre_ping=True,
        pool_timeout=timeout,
    )

engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

def init_db(bind: Engine = None) -> None:
    """
    Create all tables that are defined via SQLModel subclasses.
    """
    # registers the tables on SQLModel.metadata
    import movie_catalog.models.movie  # noqa: F401
    import movie_catalog.models.user  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)

def get_db():
    with Session(engine) as session:
        yield session

@contextmanager
def store_errors(action: str, db: Session = None):
    """
    Translate any SQLAlchemy failure inside the block into a StoreError,
    rolling back `db` first so the session stays usable.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        if db is not None:
            db.rollback()
        logger.error("Database error while {}: {}", action, exc)
        raise StoreError() from exc
