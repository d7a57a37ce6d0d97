from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Stored folder sort type meaning "use the library-wide item order".
FOLDER_SORT_GLOBAL = "global"


class Library(Base):
    __tablename__ = "library"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    sort_order = Column("sortOrder", Integer, nullable=False, default=0)


class Item(Base):
    __tablename__ = "item"

    library_id = Column("libraryId", Integer, primary_key=True)
    item_id = Column("itemId", String, primary_key=True)
    name = Column(String, nullable=False)
    name_for_sort = Column("nameForSort", String, nullable=False, default="")
    ext = Column(String, nullable=False, default="")
    size = Column(Integer, nullable=False, default=0)
    is_deleted = Column("isDeleted", Boolean, nullable=False, default=False)
    modification_time = Column("modificationTime", Integer, nullable=False, default=0)  # "date added"
    height = Column(Integer, nullable=False, default=0)
    width = Column(Integer, nullable=False, default=0)
    no_thumbnail = Column("noThumbnail", Boolean, nullable=False, default=False)
    star = Column(Integer, nullable=False, default=0)
    duration = Column(Float, nullable=False, default=0.0)
    tags_json = Column("tags", Text, nullable=False, default="[]")  # JSON array of strings
    annotation = Column(Text, nullable=False, default="")

    __table_args__ = (
        Index("idx_item_nameForSort", "libraryId", "isDeleted", "nameForSort"),
        Index("idx_item_modificationTime", "libraryId", "isDeleted", "modificationTime"),
        Index("idx_item_star", "libraryId", "isDeleted", "star"),
    )


class Folder(Base):
    __tablename__ = "folder"

    library_id = Column("libraryId", Integer, primary_key=True)
    folder_id = Column("folderId", String, primary_key=True)
    parent_id = Column("parentId", String, nullable=True)  # NULL = root folder
    name = Column(String, nullable=False)
    name_for_sort = Column("nameForSort", String, nullable=False, default="")
    modification_time = Column("modificationTime", Integer, nullable=False, default=0)
    manual_order = Column("manualOrder", Integer, nullable=False, default=0)
    cover_item_id = Column("coverItemId", String, nullable=True)

    # Per-folder item order override
    sort_type = Column("sortType", String, nullable=False, default=FOLDER_SORT_GLOBAL)
    sort_ascending = Column("sortAscending", Boolean, nullable=False, default=True)
    sort_modified = Column("sortModified", Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_folder_parent", "libraryId", "parentId"),
        Index("idx_folder_nameForSort", "libraryId", "nameForSort"),
        Index("idx_folder_modificationTime", "libraryId", "modificationTime"),
        Index("idx_folder_manualOrder", "libraryId", "manualOrder"),
    )


class FolderItem(Base):
    """Membership of an item in a folder. Items with no rows here are uncategorized."""
    __tablename__ = "folderItem"

    library_id = Column("libraryId", Integer, primary_key=True)
    folder_id = Column("folderId", String, primary_key=True)
    item_id = Column("itemId", String, primary_key=True)
    order_value = Column("orderValue", String, nullable=False, default="")

    __table_args__ = (
        Index("idx_folderItem_item", "libraryId", "itemId"),
        Index("idx_folderItem_order", "libraryId", "folderId", "orderValue"),
    )


# Columns the read layer relies on, by table. Used by the schema check.
REQUIRED_COLUMNS = {
    table.name: [column.name for column in table.columns]
    for table in Base.metadata.sorted_tables
}


def create_all(engine) -> None:
    """Create every table. For fixtures and tooling; the read layer never calls this."""
    Base.metadata.create_all(engine)
