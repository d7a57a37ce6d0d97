"""Library API: items, folders, covers and tag suggestions as read-only records."""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy.orm import Session

from ..database.folder_repo import (
    child_folders,
    folder_items,
    get_folder,
    resolve_folder_cover,
    root_folders,
)
from ..database.item_repo import ItemScope, ScopeKind, all_items, random_items, uncategorized_items
from ..database.tag_repo import DEFAULT_TAG_LIMIT, tag_counts
from ..sorting.models import FolderSortSelection, GlobalSortSelection
from ..utils.logging import get_logger
from .models import FolderCover, FolderRecord, ItemRecord, TagCount

if TYPE_CHECKING:
    from ..database.schema import Folder, Item

logger = get_logger(__name__)


def _item_row_to_record(item_row: "Item") -> ItemRecord:
    """Convert Item ORM row to ItemRecord."""
    return ItemRecord(
        library_id=item_row.library_id,
        item_id=item_row.item_id,
        name=item_row.name,
        ext=item_row.ext,
        height=item_row.height or 0,
        width=item_row.width or 0,
        no_thumbnail=bool(item_row.no_thumbnail),
        duration=item_row.duration or 0.0,
    )


def _folder_row_to_record(folder_row: "Folder") -> FolderRecord:
    """Convert Folder ORM row to FolderRecord."""
    return FolderRecord(
        library_id=folder_row.library_id,
        folder_id=folder_row.folder_id,
        parent_id=folder_row.parent_id,
        name=folder_row.name,
        cover_item_id=folder_row.cover_item_id,
        sort_type=folder_row.sort_type or "global",
        sort_ascending=True if folder_row.sort_ascending is None else bool(folder_row.sort_ascending),
    )


def list_items(
    session: Session,
    library_id: int,
    sort: GlobalSortSelection,
    search_text: str = "",
    scope: Optional[ItemScope] = None,
) -> List[ItemRecord]:
    """
    List items of a library for one scope.

    Args:
        session: SQLAlchemy session
        library_id: Library to read
        sort: Global sort selection (a folder's own override still wins)
        search_text: Item free text
        scope: All items (default), uncategorized items, or one folder

    Returns:
        ItemRecord list; empty when a folder scope names an unknown folder
    """
    scope = scope or ItemScope.all()

    if scope.kind is ScopeKind.UNCATEGORIZED:
        rows = uncategorized_items(session, library_id, sort, search_text)
    elif scope.kind is ScopeKind.FOLDER:
        folder_row = get_folder(session, library_id, scope.folder_id or "")
        if folder_row is None:
            logger.warning(f"Folder not found: library={library_id} folder={scope.folder_id}")
            return []
        rows = folder_items(session, folder_row, sort, search_text)
    else:
        rows = all_items(session, library_id, sort, search_text)

    return [_item_row_to_record(row) for row in rows]


def random_cover(session: Session, library_id: int, search_text: str = "") -> Optional[ItemRecord]:
    """One random visible item, used as the cover of the "all items" collection."""
    rows = random_items(session, library_id, search_text=search_text, limit=1)
    return _item_row_to_record(rows[0]) if rows else None


def list_folders(
    session: Session,
    library_id: int,
    sort: FolderSortSelection,
    parent_id: Optional[str] = None,
    search_text: str = "",
) -> List[FolderRecord]:
    """List root folders, or the children of parent_id when given."""
    if parent_id is None:
        rows = root_folders(session, library_id, sort, search_text)
    else:
        rows = child_folders(session, library_id, parent_id, sort, search_text)
    return [_folder_row_to_record(row) for row in rows]


def get_folder_cover(
    session: Session,
    library_id: int,
    folder_id: str,
    global_sort: GlobalSortSelection,
) -> Optional[FolderCover]:
    """
    Get a folder together with its cover item.

    Returns:
        FolderCover (cover may be None) or None if the folder does not exist
    """
    folder_row = get_folder(session, library_id, folder_id)
    if folder_row is None:
        return None

    cover_row = resolve_folder_cover(session, folder_row, global_sort)
    return FolderCover(
        folder=_folder_row_to_record(folder_row),
        cover=_item_row_to_record(cover_row) if cover_row is not None else None,
    )


def suggest_tags(
    session: Session,
    library_id: int,
    scope: Optional[ItemScope] = None,
    item_search_text: str = "",
    tag_search_text: str = "",
    limit: int = DEFAULT_TAG_LIMIT,
) -> List[TagCount]:
    """Ranked tag suggestions for the search box."""
    rows = tag_counts(
        session,
        library_id,
        scope or ItemScope.all(),
        item_search_text=item_search_text,
        tag_search_text=tag_search_text,
        limit=limit,
    )
    return [TagCount(tag=str(tag), count=count) for tag, count in rows]
