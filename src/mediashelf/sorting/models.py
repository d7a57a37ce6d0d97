"""Pydantic models for sort selections and the per-folder override."""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class GlobalSortType(str, Enum):
    """Library-wide item order."""
    DATE_ADDED = "dateAdded"
    TITLE = "title"
    RATING = "rating"
    SIZE = "size"
    RANDOM = "random"


class FolderItemSortType(str, Enum):
    """Item order inside a folder; GLOBAL defers to the library-wide selection."""
    GLOBAL = "global"
    MANUAL = "manual"
    DATE_ADDED = "dateAdded"
    TITLE = "title"
    RATING = "rating"
    SIZE = "size"
    RANDOM = "random"


class FolderSortType(str, Enum):
    """Order of folder listings (root and child folders)."""
    MANUAL = "manual"
    DATE_ADDED = "dateAdded"
    TITLE = "title"


class GlobalSortSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: GlobalSortType = Field(default=GlobalSortType.DATE_ADDED)
    ascending: bool = Field(default=True)


class FolderItemSortSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: FolderItemSortType = Field(default=FolderItemSortType.GLOBAL)
    ascending: bool = Field(default=True)


class FolderSortSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: FolderSortType = Field(default=FolderSortType.MANUAL)
    ascending: bool = Field(default=True)


class UseGlobal(BaseModel):
    """The folder has no override: its items follow the global selection."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["global"] = "global"


class UseExplicit(BaseModel):
    """The folder declares its own item order."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit"] = "explicit"
    selection: FolderItemSortSelection


FolderSortOverride = Union[UseGlobal, UseExplicit]


def override_from_stored(sort_type: str | None, ascending: bool | None) -> FolderSortOverride:
    """
    Decode a folder's stored (sortType, sortAscending) pair.

    "global", empty and unrecognised types all mean UseGlobal.
    """
    try:
        item_type = FolderItemSortType(sort_type)
    except ValueError:
        return UseGlobal()
    if item_type is FolderItemSortType.GLOBAL:
        return UseGlobal()
    return UseExplicit(
        selection=FolderItemSortSelection(type=item_type, ascending=True if ascending is None else ascending)
    )
