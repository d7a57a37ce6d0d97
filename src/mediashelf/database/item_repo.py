"""Repository functions for item listings.

Every item query starts from base_item_filters(), which always scopes to one
library and hides soft-deleted items. There is no way to build an item query
through this module without those two conditions.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import exists
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import ColumnElement

from mediashelf.database.errors import data_access
from mediashelf.database.schema import FolderItem, Item
from mediashelf.search.like_builder import (
    build_like_predicates,
    column_contains,
    json_array_contains,
)
from mediashelf.sorting.models import GlobalSortSelection
from mediashelf.sorting.resolver import item_order_by, random_order
from mediashelf.utils.logging import get_logger

logger = get_logger(__name__)


class ScopeKind(str, Enum):
    ALL = "all"
    UNCATEGORIZED = "uncategorized"
    FOLDER = "folder"


class ItemScope(BaseModel):
    """Which items a listing or tag aggregation covers."""
    model_config = ConfigDict(frozen=True)

    kind: ScopeKind = ScopeKind.ALL
    folder_id: Optional[str] = None

    @classmethod
    def all(cls) -> "ItemScope":
        return cls(kind=ScopeKind.ALL)

    @classmethod
    def uncategorized(cls) -> "ItemScope":
        return cls(kind=ScopeKind.UNCATEGORIZED)

    @classmethod
    def folder(cls, folder_id: str) -> "ItemScope":
        return cls(kind=ScopeKind.FOLDER, folder_id=folder_id)


def item_search_predicates(search_text: str | None) -> List[ColumnElement]:
    """Per-token predicates over item name, annotation and tags."""
    return build_like_predicates(
        search_text,
        [
            column_contains(Item.name),
            column_contains(Item.annotation),
            json_array_contains(Item.tags_json),
        ],
    )


def base_item_filters(library_id: int, search_text: str | None = "") -> List[ColumnElement]:
    """Library scope AND not deleted AND every search token."""
    return [
        Item.library_id == library_id,
        Item.is_deleted.is_(False),
        *item_search_predicates(search_text),
    ]


def not_in_any_folder() -> ColumnElement:
    """True for items with no folder membership row."""
    return ~exists().where(
        FolderItem.library_id == Item.library_id,
        FolderItem.item_id == Item.item_id,
    )


def in_folder(folder_id: str) -> ColumnElement:
    """True for items with a membership row in the given folder."""
    return exists().where(
        FolderItem.library_id == Item.library_id,
        FolderItem.item_id == Item.item_id,
        FolderItem.folder_id == folder_id,
    )


def scope_filters(scope: ItemScope) -> List[ColumnElement]:
    """Extra membership conditions for a scope (none for ALL)."""
    if scope.kind is ScopeKind.UNCATEGORIZED:
        return [not_in_any_folder()]
    if scope.kind is ScopeKind.FOLDER:
        if not scope.folder_id:
            raise ValueError("Folder scope requires folder_id")
        return [in_folder(scope.folder_id)]
    return []


def search_items_query(session: Session, library_id: int, search_text: str | None = "") -> Query:
    """Unordered base query over visible items of a library."""
    return session.query(Item).filter(*base_item_filters(library_id, search_text))


def all_items_query(
    session: Session,
    library_id: int,
    sort: GlobalSortSelection,
    search_text: str | None = "",
) -> Query:
    return search_items_query(session, library_id, search_text).order_by(*item_order_by(sort))


def uncategorized_items_query(
    session: Session,
    library_id: int,
    sort: GlobalSortSelection,
    search_text: str | None = "",
) -> Query:
    return (
        search_items_query(session, library_id, search_text)
        .filter(not_in_any_folder())
        .order_by(*item_order_by(sort))
    )


def random_items_query(
    session: Session,
    library_id: int,
    sort: Optional[GlobalSortSelection] = None,
    search_text: str | None = "",
) -> Query:
    """Visible items in random order; the sort selection is accepted but never applied."""
    return search_items_query(session, library_id, search_text).order_by(*random_order())


def _fetch(query: Query, operation: str, library_id: int, limit: Optional[int]) -> List[Item]:
    if limit is not None:
        query = query.limit(limit)
    with data_access(operation):
        rows = query.all()
    logger.debug(f"{operation}: library={library_id} rows={len(rows)}")
    return rows


def all_items(
    session: Session,
    library_id: int,
    sort: GlobalSortSelection,
    search_text: str | None = "",
    limit: Optional[int] = None,
) -> List[Item]:
    """
    List every visible item of a library matching the search text.

    Args:
        session: SQLAlchemy session
        library_id: Library to read
        sort: Global sort selection
        search_text: Free text; every whitespace-separated token must match
            the name, annotation or a tag
        limit: Optional row cap

    Returns:
        Item rows in resolved sort order

    Raises:
        DataAccessFailure: If the store cannot be read
    """
    return _fetch(all_items_query(session, library_id, sort, search_text), "all_items", library_id, limit)


def uncategorized_items(
    session: Session,
    library_id: int,
    sort: GlobalSortSelection,
    search_text: str | None = "",
    limit: Optional[int] = None,
) -> List[Item]:
    """Like all_items, restricted to items that belong to no folder."""
    return _fetch(
        uncategorized_items_query(session, library_id, sort, search_text),
        "uncategorized_items",
        library_id,
        limit,
    )


def random_items(
    session: Session,
    library_id: int,
    sort: Optional[GlobalSortSelection] = None,
    search_text: str | None = "",
    limit: Optional[int] = None,
) -> List[Item]:
    """Visible items in a fresh random order, used to pick a collection cover."""
    return _fetch(random_items_query(session, library_id, sort, search_text), "random_items", library_id, limit)


def get_item(session: Session, library_id: int, item_id: str) -> Optional[Item]:
    """Get a visible item by ID."""
    with data_access("get_item"):
        return (
            session.query(Item)
            .filter(*base_item_filters(library_id), Item.item_id == item_id)
            .first()
        )
