"""Resolve sort selections into ORDER BY clauses.

Some criteria have a natural reversed direction: "date added" lists newest first
and a folder's manual order lists the highest orderValue first. For those the
rendered direction is DESC when the selection is ascending. Every non-random
order ends with the identity column so repeated queries return the same order.
"""

from typing import Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from mediashelf.database.schema import Folder, FolderItem, Item
from mediashelf.sorting.models import (
    FolderItemSortSelection,
    FolderItemSortType,
    FolderSortOverride,
    FolderSortSelection,
    FolderSortType,
    GlobalSortSelection,
    UseExplicit,
)

OrderSpec = List[ColumnElement]

# criterion -> (column, reversed)
_ITEM_COLUMNS: Dict[FolderItemSortType, Tuple[object, bool]] = {
    FolderItemSortType.MANUAL: (FolderItem.order_value, True),
    FolderItemSortType.DATE_ADDED: (Item.modification_time, True),
    FolderItemSortType.TITLE: (Item.name_for_sort, False),
    FolderItemSortType.RATING: (Item.star, False),
    FolderItemSortType.SIZE: (Item.size, False),
}

_FOLDER_COLUMNS: Dict[FolderSortType, Tuple[object, bool]] = {
    FolderSortType.MANUAL: (Folder.manual_order, False),
    FolderSortType.DATE_ADDED: (Folder.modification_time, True),
    FolderSortType.TITLE: (Folder.name_for_sort, False),
}


def _directed(column, ascending: bool, reversed_: bool) -> ColumnElement:
    return column.asc() if ascending != reversed_ else column.desc()


def random_order() -> OrderSpec:
    """Fresh permutation on every execution; no tie-break."""
    return [func.random()]


def resolve_item_sort(
    global_sort: GlobalSortSelection,
    override: FolderSortOverride | None = None,
) -> FolderItemSortSelection:
    """
    Pick the item order for a listing.

    An explicit folder override wins; otherwise the global selection is used with
    its own direction.
    """
    if isinstance(override, UseExplicit):
        return override.selection
    return FolderItemSortSelection(
        type=FolderItemSortType(global_sort.type.value),
        ascending=global_sort.ascending,
    )


def folder_item_order_by(selection: FolderItemSortSelection) -> OrderSpec:
    """
    ORDER BY for an item listing.

    MANUAL orders by folderItem.orderValue, so the statement must join folderItem.
    GLOBAL is not resolvable here; pass it through resolve_item_sort first.
    """
    if selection.type is FolderItemSortType.RANDOM:
        return random_order()
    if selection.type is FolderItemSortType.GLOBAL:
        raise ValueError("GLOBAL item sort must be resolved against a global selection first")

    column, reversed_ = _ITEM_COLUMNS[selection.type]
    order: OrderSpec = [_directed(column, selection.ascending, reversed_)]
    if selection.type is FolderItemSortType.RATING:
        # equal ratings: newest first when ascending
        order.append(_directed(Item.modification_time, selection.ascending, True))
    order.append(Item.item_id.asc())
    return order


def item_order_by(
    global_sort: GlobalSortSelection,
    override: FolderSortOverride | None = None,
) -> OrderSpec:
    """ORDER BY for items, resolving a folder override against the global selection."""
    return folder_item_order_by(resolve_item_sort(global_sort, override))


def folder_order_by(selection: FolderSortSelection) -> OrderSpec:
    """ORDER BY for root/child folder listings."""
    column, reversed_ = _FOLDER_COLUMNS[selection.type]
    return [_directed(column, selection.ascending, reversed_), Folder.folder_id.asc()]
