"""Tests for the database schema contract check."""

import sqlite3

import pytest
from sqlalchemy.exc import OperationalError

from mediashelf.database.errors import DataAccessFailure
from mediashelf.database.schema import create_all
from mediashelf.database.schema_check import find_schema_drift, verify_schema
from mediashelf.database.sqlite_client import get_engine


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "library.db"
    engine = get_engine(str(path), read_only=False)
    create_all(engine)
    engine.dispose()
    return path


def test_matching_schema_passes(db_path):
    verify_schema(str(db_path))


def test_missing_file_is_a_data_access_failure(tmp_path):
    with pytest.raises(DataAccessFailure) as excinfo:
        verify_schema(str(tmp_path / "missing.db"))
    assert excinfo.value.operation == "verify_schema"


def test_missing_table_is_reported(db_path):
    conn = sqlite3.connect(db_path)
    conn.execute('DROP TABLE "folderItem"')
    conn.commit()
    conn.close()

    with pytest.raises(DataAccessFailure) as excinfo:
        verify_schema(str(db_path))
    assert "table: folderItem" in excinfo.value.message


def test_find_schema_drift_lists_missing_columns():
    conn = sqlite3.connect(":memory:")
    conn.execute('CREATE TABLE item ("itemId" TEXT, name TEXT)')
    try:
        drift = find_schema_drift(conn, {"item": ["itemId", "name", "tags"], "folder": ["folderId"]})
    finally:
        conn.close()

    assert drift == ["item.tags", "table: folder"]


def test_read_only_engine_refuses_writes(db_path):
    engine = get_engine(str(db_path))
    try:
        with pytest.raises(OperationalError):
            with engine.begin() as conn:
                conn.exec_driver_sql('INSERT INTO library (name, "sortOrder") VALUES (\'x\', 0)')
    finally:
        engine.dispose()
