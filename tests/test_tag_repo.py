"""Tests for tag suggestion counts."""

import pytest

from mediashelf.database.errors import DataAccessFailure
from mediashelf.database.item_repo import ItemScope
from mediashelf.database.schema import Item
from mediashelf.database.tag_repo import (
    suppression_text,
    tag_counts,
    tags_in_all,
    tags_in_folder,
    tags_in_uncategorized,
)


def test_typed_item_tokens_are_not_suggested(session, add_item):
    add_item("A", "Photo1", tags=["cat", "blue"])
    add_item("B", "Photo2", tags=["cat"], is_deleted=True)
    add_item("C", "cats are great", tags=[])

    assert tags_in_all(session, 1, item_search_text="cat") == [("blue", 1)]


def test_counts_items_not_occurrences(session, add_item):
    add_item("A", tags=["sky", "sky", "sea"])
    add_item("B", tags=["sky"])

    assert tags_in_all(session, 1) == [("sky", 2), ("sea", 1)]


def test_ties_rank_by_tag_ascending(session, add_item):
    add_item("A", tags=["blue", "art"])
    add_item("B", tags=["art", "blue", "zoo"])

    assert tags_in_all(session, 1) == [("art", 2), ("blue", 2), ("zoo", 1)]


def test_limit(session, add_item):
    add_item("A", tags=["a", "b", "c", "d"])
    add_item("B", tags=["d"])

    assert tags_in_all(session, 1, limit=2) == [("d", 2), ("a", 1)]


def test_deleted_and_other_library_items_do_not_count(session, add_item):
    add_item("A", tags=["kept"])
    add_item("B", tags=["gone"], is_deleted=True)
    add_item("C", tags=["elsewhere"], library_id=2)

    assert tags_in_all(session, 1) == [("kept", 1)]


def test_tag_filter_is_case_insensitive_substring(session, add_item):
    add_item("A", tags=["Sunset", "sunrise", "beach"])

    assert tags_in_all(session, 1, tag_search_text="SUN") == [("Sunset", 1), ("sunrise", 1)]
    assert tags_in_all(session, 1, tag_search_text="ns") == [("Sunset", 1)]


def test_tag_filter_treats_wildcards_literally(session, add_item):
    add_item("A", tags=["50%off", "50 off", "5_0"])

    assert tags_in_all(session, 1, tag_search_text="50%") == [("50%off", 1)]
    assert tags_in_all(session, 1, tag_search_text="_") == [("5_0", 1)]


def test_tag_filter_keeps_surrounding_spaces(session, add_item):
    add_item("A", tags=["red", "dark red"])

    assert tags_in_all(session, 1, tag_search_text=" red") == [("dark red", 1)]


def test_partially_typed_tags_are_suppressed(session, add_item):
    """A tag contained in the typed text is hidden, including short ones."""
    add_item("A", "sun photo", tags=["sunset", "sun", "s", "sky"])

    assert tags_in_all(session, 1, item_search_text="sun") == [
        ("sky", 1),
        ("sunset", 1),
    ]


def test_suppression_spans_item_and_tag_text(session, add_item):
    add_item("A", "dog", tags=["dog", "red", "redwood"])

    assert tags_in_all(session, 1, item_search_text="dog", tag_search_text="red") == [
        ("redwood", 1),
    ]


def test_suppression_text_skips_empty_parts():
    assert suppression_text("cat", "") == "cat"
    assert suppression_text("", "blue") == "blue"
    assert suppression_text("cat", "blue") == "cat blue"
    assert suppression_text(None, None) == ""


def test_uncategorized_scope(session, add_item, add_folder, add_membership):
    add_folder("F")
    add_item("A", tags=["filed"])
    add_item("B", tags=["loose"])
    add_membership("F", "A")

    assert tags_in_uncategorized(session, 1) == [("loose", 1)]


def test_folder_scope(session, add_item, add_folder, add_membership):
    add_folder("F")
    add_folder("G")
    add_item("A", tags=["inside", "shared"])
    add_item("B", tags=["shared"])
    add_item("C", tags=["other"])
    add_membership("F", "A")
    add_membership("F", "B")
    add_membership("G", "C")

    assert tags_in_folder(session, 1, "F") == [("shared", 2), ("inside", 1)]


def test_folder_scope_without_id_is_rejected(session):
    with pytest.raises(ValueError):
        tag_counts(session, 1, ItemScope(kind="folder"))


def test_items_without_tags_contribute_nothing(session, add_item):
    add_item("A", tags=[])

    assert tags_in_all(session, 1) == []


def test_malformed_tag_json_is_a_data_access_failure(session, add_item):
    add_item("A", tags=["fine"])
    session.add(Item(library_id=1, item_id="B", name="broken", tags_json="not json"))
    session.commit()

    with pytest.raises(DataAccessFailure) as excinfo:
        tags_in_all(session, 1)
    assert excinfo.value.operation == "tag_counts"
