from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def get_engine(sqlite_path: str, read_only: bool = True) -> Engine:
    """
    Create an engine for the library database.

    The read layer opens the file in SQLite URI read-only mode, so a missing file
    or an accidental write fails instead of creating or mutating anything.
    """
    if read_only:
        engine_url = f"sqlite:///file:{sqlite_path}?mode=ro&uri=true"
    else:
        engine_url = f"sqlite:///{sqlite_path}"
    return create_engine(engine_url, future=True)


def get_session(sqlite_path: str, read_only: bool = True) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    engine = get_engine(sqlite_path, read_only=read_only)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


@contextmanager
def session_context(sqlite_path: str, read_only: bool = True) -> Generator[Session, None, None]:
    """
    Context manager for SQLAlchemy sessions.

    Ensures rollback on error and session cleanup.

    Usage:
        with session_context(sqlite_path) as session:
            items = all_items(session, library_id, sort)
    """
    session = get_session(sqlite_path, read_only=read_only)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
