"""Pytest configuration and fixtures."""

import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from mediashelf.database.schema import Base, Folder, FolderItem, Item, Library


@pytest.fixture
def session():
    """Create a temporary in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    session.add(Library(id=1, name="Main"))
    session.add(Library(id=2, name="Other"))
    session.commit()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def add_item(session):
    """Insert an item row; tags are given as a list and stored as JSON."""
    def _add(
        item_id,
        name=None,
        *,
        library_id=1,
        tags=(),
        annotation="",
        is_deleted=False,
        modification_time=0,
        name_for_sort=None,
        star=0,
        size=0,
        ext="jpg",
    ):
        name = item_id if name is None else name
        row = Item(
            library_id=library_id,
            item_id=item_id,
            name=name,
            name_for_sort=name.lower() if name_for_sort is None else name_for_sort,
            ext=ext,
            size=size,
            is_deleted=is_deleted,
            modification_time=modification_time,
            height=100,
            width=200,
            no_thumbnail=False,
            star=star,
            duration=0.0,
            tags_json=json.dumps(list(tags)),
            annotation=annotation,
        )
        session.add(row)
        session.commit()
        return row
    return _add


@pytest.fixture
def add_folder(session):
    """Insert a folder row."""
    def _add(
        folder_id,
        name=None,
        *,
        parent_id=None,
        library_id=1,
        manual_order=0,
        modification_time=0,
        sort_type="global",
        sort_ascending=True,
        cover_item_id=None,
    ):
        name = folder_id if name is None else name
        row = Folder(
            library_id=library_id,
            folder_id=folder_id,
            parent_id=parent_id,
            name=name,
            name_for_sort=name.lower(),
            modification_time=modification_time,
            manual_order=manual_order,
            cover_item_id=cover_item_id,
            sort_type=sort_type,
            sort_ascending=sort_ascending,
            sort_modified=sort_type != "global",
        )
        session.add(row)
        session.commit()
        return row
    return _add


@pytest.fixture
def add_membership(session):
    """Put an item into a folder."""
    def _add(folder_id, item_id, *, library_id=1, order_value=""):
        row = FolderItem(
            library_id=library_id,
            folder_id=folder_id,
            item_id=item_id,
            order_value=order_value,
        )
        session.add(row)
        session.commit()
        return row
    return _add
