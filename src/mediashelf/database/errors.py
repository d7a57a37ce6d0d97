"""Error kinds surfaced by the read layer."""

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

from mediashelf.utils.logging import get_logger

logger = get_logger(__name__)


class DataAccessFailure(Exception):
    """The store was unreachable, failed with an I/O error, or does not match the schema."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


@contextmanager
def data_access(operation: str) -> Iterator[None]:
    """
    Run a read against the store, converting driver errors into DataAccessFailure.

    Usage:
        with data_access("all_items"):
            rows = session.execute(stmt).scalars().all()
    """
    try:
        yield
    except (SQLAlchemyError, sqlite3.Error) as exc:
        logger.error(f"Data access failed in {operation}: {exc}", exc_info=True)
        raise DataAccessFailure(operation, str(exc)) from exc
