"""Read-only records handed to presentation code.

These mirror the display columns of the stored rows; they never carry
write-path fields such as isDeleted.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field

TEXT_EXTENSIONS = frozenset({"txt", "md", "json", "yaml", "log"})


class ItemRecord(BaseModel):
    """An item as shown in a grid."""
    model_config = ConfigDict(frozen=True)

    library_id: int
    item_id: str
    name: str
    ext: str
    height: int = 0
    width: int = 0
    no_thumbnail: bool = False
    duration: float = 0.0

    @computed_field
    @property
    def is_text_file(self) -> bool:
        return self.ext.lower() in TEXT_EXTENSIONS

    @computed_field
    @property
    def image_path(self) -> str:
        """Path of the original file inside the library folder."""
        return f"images/{self.item_id}.info/{self.name}.{self.ext}"

    @computed_field
    @property
    def thumbnail_path(self) -> str:
        """Thumbnail path; items without a thumbnail use the original file."""
        if self.no_thumbnail:
            return self.image_path
        return f"images/{self.item_id}.info/{self.name}_thumbnail.png"


class FolderRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    library_id: int
    folder_id: str
    parent_id: Optional[str] = None
    name: str
    cover_item_id: Optional[str] = None
    sort_type: str = "global"
    sort_ascending: bool = True


class TagCount(BaseModel):
    """A suggested tag and the number of items in scope carrying it."""
    model_config = ConfigDict(frozen=True)

    tag: str
    count: int


class FolderCover(BaseModel):
    """Composition DTO: a folder with the item used as its thumbnail, if any."""
    model_config = ConfigDict(frozen=True)

    folder: FolderRecord
    cover: Optional[ItemRecord] = None
