# barbershop/db.py

import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, create_engine, Session

from .config import get_settings
from .errors import PersistenceError, SchedulingError

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(database_url, echo=echo, connect_args=connect_args)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.sql_echo)


def create_db_and_tables():
    from . import models  # noqa: F401  registers the tables on SQLModel.metadata

    SQLModel.metadata.create_all(engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


@contextmanager
def reading(action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Failed to %s", action)
        raise PersistenceError(f"Failed to {action}") from exc


@contextmanager
def write_transaction(session: Session, action: str, conflict: SchedulingError = None):
    """Run the block and commit it as one transaction.

    Domain errors raised inside the block roll back and propagate unchanged.
    An IntegrityError becomes ``conflict`` when one is given; any other
    database failure is logged and re-raised as PersistenceError.
    """
    try:
        yield
        session.commit()
    except SchedulingError:
        session.rollback()
        raise
    except IntegrityError as exc:
        session.rollback()
        if conflict is not None:
            logger.warning("Integrity conflict while trying to %s: %s", action, exc.orig)
            raise conflict from exc
        logger.exception("Failed to %s", action)
        raise PersistenceError(f"Failed to {action}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to %s", action)
        raise PersistenceError(f"Failed to {action}") from exc
