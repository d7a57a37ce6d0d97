"""Repository functions for folder listings, folder contents and folder covers."""

from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import ColumnElement

from mediashelf.database.errors import data_access
from mediashelf.database.item_repo import base_item_filters, get_item
from mediashelf.database.schema import Folder, FolderItem, Item
from mediashelf.search.like_builder import build_like_predicates, column_contains
from mediashelf.sorting.models import (
    FolderSortOverride,
    FolderSortSelection,
    GlobalSortSelection,
    override_from_stored,
)
from mediashelf.sorting.resolver import folder_order_by, item_order_by
from mediashelf.utils.logging import get_logger

logger = get_logger(__name__)

# The folder itself is depth 1; the fallback walks direct children (depth 2)
# and grandchildren (depth 3) and never deeper.
FALLBACK_FIRST_DEPTH = 2
FALLBACK_MAX_DEPTH = 3


def folder_search_predicates(search_text: str | None) -> List[ColumnElement]:
    """Per-token predicates over the folder name only."""
    return build_like_predicates(search_text, [column_contains(Folder.name)])


def folder_sort_override(folder: Folder) -> FolderSortOverride:
    """The item order override stored on a folder row."""
    return override_from_stored(folder.sort_type, folder.sort_ascending)


def search_folders_query(session: Session, library_id: int, search_text: str | None = "") -> Query:
    return session.query(Folder).filter(
        Folder.library_id == library_id,
        *folder_search_predicates(search_text),
    )


def root_folders_query(
    session: Session,
    library_id: int,
    sort: FolderSortSelection,
    search_text: str | None = "",
) -> Query:
    return (
        search_folders_query(session, library_id, search_text)
        .filter(Folder.parent_id.is_(None))
        .order_by(*folder_order_by(sort))
    )


def child_folders_query(
    session: Session,
    library_id: int,
    parent_id: str,
    sort: FolderSortSelection,
    search_text: str | None = "",
) -> Query:
    return (
        search_folders_query(session, library_id, search_text)
        .filter(Folder.parent_id == parent_id)
        .order_by(*folder_order_by(sort))
    )


def folder_items_query(
    session: Session,
    folder: Folder,
    global_sort: GlobalSortSelection,
    search_text: str | None = "",
) -> Query:
    """
    Visible items with a membership row in the folder.

    Joins folderItem (one row per item per folder) so the manual order can use
    folderItem.orderValue.
    """
    return (
        session.query(Item)
        .join(
            FolderItem,
            and_(
                FolderItem.library_id == Item.library_id,
                FolderItem.item_id == Item.item_id,
                FolderItem.folder_id == folder.folder_id,
            ),
        )
        .filter(*base_item_filters(folder.library_id, search_text))
        .order_by(*item_order_by(global_sort, folder_sort_override(folder)))
    )


def root_folders(
    session: Session,
    library_id: int,
    sort: FolderSortSelection,
    search_text: str | None = "",
) -> List[Folder]:
    """
    List top-level folders of a library.

    Args:
        session: SQLAlchemy session
        library_id: Library to read
        sort: Folder listing sort selection
        search_text: Free text; every token must occur in the folder name

    Returns:
        Folder rows with no parent, in resolved order
    """
    with data_access("root_folders"):
        rows = root_folders_query(session, library_id, sort, search_text).all()
    logger.debug(f"root_folders: library={library_id} rows={len(rows)}")
    return rows


def child_folders(
    session: Session,
    library_id: int,
    parent_id: str,
    sort: FolderSortSelection,
    search_text: str | None = "",
) -> List[Folder]:
    """List the direct children of a folder."""
    with data_access("child_folders"):
        rows = child_folders_query(session, library_id, parent_id, sort, search_text).all()
    logger.debug(f"child_folders: library={library_id} parent={parent_id} rows={len(rows)}")
    return rows


def folder_items(
    session: Session,
    folder: Folder,
    global_sort: GlobalSortSelection,
    search_text: str | None = "",
    limit: Optional[int] = None,
) -> List[Item]:
    """
    List visible items in a folder.

    The folder's own sort override wins; a folder without one follows global_sort.
    """
    query = folder_items_query(session, folder, global_sort, search_text)
    if limit is not None:
        query = query.limit(limit)
    with data_access("folder_items"):
        rows = query.all()
    logger.debug(f"folder_items: library={folder.library_id} folder={folder.folder_id} rows={len(rows)}")
    return rows


def _child_folder_ids(session: Session, library_id: int, parent_ids: List[str]) -> List[str]:
    rows = (
        session.query(Folder.folder_id)
        .filter(Folder.library_id == library_id, Folder.parent_id.in_(parent_ids))
        .order_by(Folder.folder_id)
        .all()
    )
    return [folder_id for (folder_id,) in rows]


def descendant_levels(session: Session, folder: Folder) -> List[List[str]]:
    """
    Breadth-first folder IDs below a folder, one list per depth.

    Index 0 holds the direct children (depth 2), index 1 the grandchildren
    (depth 3). The walk stops at FALLBACK_MAX_DEPTH whatever lies below.
    """
    levels: List[List[str]] = []
    frontier = [folder.folder_id]
    depth = FALLBACK_FIRST_DEPTH
    with data_access("descendant_levels"):
        while frontier and depth <= FALLBACK_MAX_DEPTH:
            frontier = _child_folder_ids(session, folder.library_id, frontier)
            if frontier:
                levels.append(frontier)
            depth += 1
    return levels


def folder_items_with_descendant_fallback(
    session: Session,
    folder: Folder,
    global_sort: GlobalSortSelection,
) -> Optional[Item]:
    """
    Find a cover candidate in the folder's subtree when the folder has no items.

    Visits direct children, then grandchildren. A shallower item always wins;
    within one depth the global item order decides. Returns None when no
    visible item is reachable within two levels.
    """
    levels = descendant_levels(session, folder)
    for offset, folder_ids in enumerate(levels):
        query = (
            session.query(Item)
            .join(
                FolderItem,
                and_(
                    FolderItem.library_id == Item.library_id,
                    FolderItem.item_id == Item.item_id,
                ),
            )
            .filter(
                *base_item_filters(folder.library_id),
                FolderItem.folder_id.in_(folder_ids),
            )
            .order_by(*item_order_by(global_sort))
        )
        with data_access("folder_items_with_descendant_fallback"):
            item = query.first()
        if item is not None:
            logger.debug(
                f"Descendant cover for folder {folder.folder_id}: "
                f"item={item.item_id} depth={FALLBACK_FIRST_DEPTH + offset}"
            )
            return item
    return None


def get_folder(session: Session, library_id: int, folder_id: str) -> Optional[Folder]:
    """Get folder by ID."""
    with data_access("get_folder"):
        return (
            session.query(Folder)
            .filter(Folder.library_id == library_id, Folder.folder_id == folder_id)
            .first()
        )


def resolve_folder_cover(
    session: Session,
    folder: Folder,
    global_sort: GlobalSortSelection,
) -> Optional[Item]:
    """
    Pick the item shown as a folder's thumbnail.

    Order of preference: the folder's explicit cover item (if still visible),
    the first of its own items, then the descendant fallback.
    """
    if folder.cover_item_id:
        item = get_item(session, folder.library_id, folder.cover_item_id)
        if item is not None:
            return item

    own = folder_items(session, folder, global_sort, limit=1)
    if own:
        return own[0]

    return folder_items_with_descendant_fallback(session, folder, global_sort)
