"""Tests for API layer guardrails and contracts."""

import ast
from pathlib import Path

from mediashelf.api.library_api import (
    get_folder_cover,
    list_folders,
    list_items,
    random_cover,
    suggest_tags,
)
from mediashelf.api.models import ItemRecord
from mediashelf.database.item_repo import ItemScope
from mediashelf.sorting.models import FolderSortSelection, GlobalSortSelection

API_DIR = Path(__file__).resolve().parents[1] / "src" / "mediashelf" / "api"


def _in_type_checking_block(tree: ast.Module, node: ast.AST) -> bool:
    for block in ast.walk(tree):
        if isinstance(block, ast.If) and isinstance(block.test, ast.Name) and block.test.id == "TYPE_CHECKING":
            if any(child is node for stmt in block.body for child in ast.walk(stmt)):
                return True
    return False


def test_api_layer_has_no_sqlalchemy_imports():
    """API files may import Session for type hints; schema rows only under TYPE_CHECKING."""
    violations = []
    for api_file in sorted(API_DIR.glob("*.py")):
        tree = ast.parse(api_file.read_text(encoding="utf-8"), filename=str(api_file))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.name.startswith("sqlalchemy"):
                        violations.append(f"{api_file.name}: import {alias.name}")
            elif isinstance(node, ast.ImportFrom):
                module = node.module or ""
                if module.startswith("sqlalchemy"):
                    names = [alias.name for alias in node.names]
                    if module != "sqlalchemy.orm" or names != ["Session"]:
                        violations.append(f"{api_file.name}: from {module} import {', '.join(names)}")
                if module.endswith("database.schema") and not _in_type_checking_block(tree, node):
                    violations.append(f"{api_file.name}:{node.lineno} imports schema outside TYPE_CHECKING")

    assert not violations, "API layer has SQLAlchemy violations:\n" + "\n".join(violations)


def test_api_layer_never_queries_directly():
    for api_file in sorted(API_DIR.glob("*.py")):
        source = api_file.read_text(encoding="utf-8")
        for pattern in ("session.query(", "session.execute(", "session.add(", "session.commit("):
            assert pattern not in source, f"{api_file.name} calls {pattern}"


def test_item_record_paths():
    record = ItemRecord(library_id=1, item_id="K1", name="beach", ext="JPG")

    assert record.image_path == "images/K1.info/beach.JPG"
    assert record.thumbnail_path == "images/K1.info/beach_thumbnail.png"
    assert record.is_text_file is False


def test_item_record_without_thumbnail_uses_original():
    record = ItemRecord(library_id=1, item_id="K2", name="notes", ext="md", no_thumbnail=True)

    assert record.thumbnail_path == record.image_path
    assert record.is_text_file is True
    assert record.model_dump()["thumbnail_path"] == "images/K2.info/notes.md"


def test_list_items_by_scope(session, add_item, add_folder, add_membership):
    add_folder("F")
    add_item("A", "filed")
    add_item("B", "loose")
    add_membership("F", "A")
    sort = GlobalSortSelection()

    assert {r.item_id for r in list_items(session, 1, sort)} == {"A", "B"}
    assert [r.item_id for r in list_items(session, 1, sort, scope=ItemScope.uncategorized())] == ["B"]
    assert [r.item_id for r in list_items(session, 1, sort, scope=ItemScope.folder("F"))] == ["A"]


def test_list_items_for_unknown_folder_is_empty(session, add_item):
    add_item("A")

    assert list_items(session, 1, GlobalSortSelection(), scope=ItemScope.folder("missing")) == []


def test_list_folders_root_and_children(session, add_folder):
    add_folder("R", "Root")
    add_folder("C", "Child", parent_id="R")
    sort = FolderSortSelection()

    assert [f.folder_id for f in list_folders(session, 1, sort)] == ["R"]
    children = list_folders(session, 1, sort, parent_id="R")
    assert [(f.folder_id, f.parent_id) for f in children] == [("C", "R")]


def test_get_folder_cover(session, add_folder, add_item, add_membership):
    add_folder("F", "Trips")
    add_folder("E", "Empty")
    add_item("A", "first")
    add_membership("F", "A")

    result = get_folder_cover(session, 1, "F", GlobalSortSelection())
    assert result.folder.name == "Trips"
    assert result.cover.item_id == "A"

    assert get_folder_cover(session, 1, "E", GlobalSortSelection()).cover is None
    assert get_folder_cover(session, 1, "missing", GlobalSortSelection()) is None


def test_random_cover(session, add_item):
    assert random_cover(session, 1) is None

    add_item("A", "only")
    assert random_cover(session, 1).item_id == "A"


def test_suggest_tags_returns_records(session, add_item):
    add_item("A", tags=["sky", "sea"])
    add_item("B", tags=["sky"])

    tags = suggest_tags(session, 1)
    assert [(t.tag, t.count) for t in tags] == [("sky", 2), ("sea", 1)]
