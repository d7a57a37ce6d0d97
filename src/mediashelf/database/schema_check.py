"""SQLite schema contract check against the tables the read layer queries."""

import sqlite3
from typing import Dict, List

from mediashelf.database.errors import DataAccessFailure, data_access
from mediashelf.database.schema import REQUIRED_COLUMNS
from mediashelf.utils.logging import get_logger

logger = get_logger(__name__)


def _table_columns(conn: sqlite3.Connection, table: str) -> List[str]:
    """Column names of a table, empty if the table does not exist."""
    cur = conn.execute(f'PRAGMA table_info("{table}");')
    return [row[1] for row in cur.fetchall()]


def find_schema_drift(
    conn: sqlite3.Connection,
    required: Dict[str, List[str]] | None = None,
) -> List[str]:
    """
    List schema elements the read layer needs but the database lacks.

    Args:
        conn: Open sqlite3 connection
        required: Mapping of table -> columns. Defaults to the ORM schema.

    Returns:
        Sorted list like ["table: folderItem", "item.tags"]; empty when compatible.
    """
    required = required or REQUIRED_COLUMNS
    drift: List[str] = []
    for table, columns in required.items():
        existing = _table_columns(conn, table)
        if not existing:
            drift.append(f"table: {table}")
            continue
        for column in columns:
            if column not in existing:
                drift.append(f"{table}.{column}")
    return sorted(drift)


def verify_schema(sqlite_path: str) -> None:
    """
    Open the database read-only and fail if it does not match the schema contract.

    Raises:
        DataAccessFailure: If the file cannot be opened or tables/columns are missing
    """
    with data_access("verify_schema"):
        conn = sqlite3.connect(f"file:{sqlite_path}?mode=ro", uri=True)
        try:
            drift = find_schema_drift(conn)
        finally:
            conn.close()

    if drift:
        logger.error(f"Schema drift in {sqlite_path}: {', '.join(drift)}")
        raise DataAccessFailure("verify_schema", f"schema mismatch: {', '.join(drift)}")
    logger.debug(f"Schema check passed for {sqlite_path}")
