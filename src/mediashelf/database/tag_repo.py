"""Repository functions for tag suggestions.

Tags are not stored as rows: each item's JSON tag array is expanded with
json_each() and grouped by the exact tag string. A tag's count is the number of
qualifying items holding it, so an item repeating a tag still counts once.
"""

from typing import List, Tuple

from sqlalchemy import distinct, func, literal, true
from sqlalchemy.orm import Query, Session

from mediashelf.database.errors import data_access
from mediashelf.database.item_repo import ItemScope, base_item_filters, scope_filters
from mediashelf.database.schema import Item
from mediashelf.search.like_builder import DEFAULT_ESCAPE, contains_pattern, json_array_elements
from mediashelf.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TAG_LIMIT = 20


def suppression_text(item_search_text: str | None, tag_search_text: str | None) -> str:
    """Item and tag search text joined by one space, skipping empty parts."""
    return " ".join(part for part in (item_search_text, tag_search_text) if part)


def tag_counts_query(
    session: Session,
    library_id: int,
    scope: ItemScope,
    item_search_text: str | None = "",
    tag_search_text: str | None = "",
    limit: int = DEFAULT_TAG_LIMIT,
) -> Query:
    tags = json_array_elements(Item.tags_json, name="tags")
    tag = tags.c.value
    count = func.count(distinct(Item.item_id))

    query = (
        session.query(tag.label("tag"), count.label("count"))
        .select_from(Item)
        .join(tags, true())
        .filter(*base_item_filters(library_id, item_search_text), *scope_filters(scope))
    )

    if tag_search_text:
        query = query.filter(tag.ilike(contains_pattern(tag_search_text), escape=DEFAULT_ESCAPE))

    # Hide tags the user has already typed, even partially.
    typed = suppression_text(item_search_text, tag_search_text)
    if typed:
        query = query.filter(func.instr(func.lower(literal(typed)), func.lower(tag)) == 0)

    return (
        query.group_by(tag)
        .having(count > 0)
        .order_by(count.desc(), tag.asc())
        .limit(limit)
    )


def tag_counts(
    session: Session,
    library_id: int,
    scope: ItemScope,
    item_search_text: str | None = "",
    tag_search_text: str | None = "",
    limit: int = DEFAULT_TAG_LIMIT,
) -> List[Tuple[str, int]]:
    """
    Rank tags of the items in scope by how many of those items carry them.

    Args:
        session: SQLAlchemy session
        library_id: Library to read
        scope: All items, uncategorized items, or one folder's items
        item_search_text: Item free text, applied exactly like item listings
        tag_search_text: Only tags containing this text (case-insensitive)
        limit: Maximum number of tags

    Returns:
        (tag, count) pairs, count descending then tag ascending
    """
    query = tag_counts_query(session, library_id, scope, item_search_text, tag_search_text, limit)
    with data_access("tag_counts"):
        rows = [(tag, count) for tag, count in query.all()]
    logger.debug(f"tag_counts: library={library_id} scope={scope.kind.value} rows={len(rows)}")
    return rows


def tags_in_all(
    session: Session,
    library_id: int,
    item_search_text: str | None = "",
    tag_search_text: str | None = "",
    limit: int = DEFAULT_TAG_LIMIT,
) -> List[Tuple[str, int]]:
    return tag_counts(session, library_id, ItemScope.all(), item_search_text, tag_search_text, limit)


def tags_in_uncategorized(
    session: Session,
    library_id: int,
    item_search_text: str | None = "",
    tag_search_text: str | None = "",
    limit: int = DEFAULT_TAG_LIMIT,
) -> List[Tuple[str, int]]:
    return tag_counts(session, library_id, ItemScope.uncategorized(), item_search_text, tag_search_text, limit)


def tags_in_folder(
    session: Session,
    library_id: int,
    folder_id: str,
    item_search_text: str | None = "",
    tag_search_text: str | None = "",
    limit: int = DEFAULT_TAG_LIMIT,
) -> List[Tuple[str, int]]:
    return tag_counts(session, library_id, ItemScope.folder(folder_id), item_search_text, tag_search_text, limit)
