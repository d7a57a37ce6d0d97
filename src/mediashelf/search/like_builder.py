"""Free-text search predicates built from escaped LIKE patterns.

Each whitespace-delimited token of the search text becomes one predicate that is
true when the token occurs, case-insensitively, in any of the searched fields.
Callers AND the predicates together; an empty list means "match everything".
"""

from typing import Callable, List, Sequence

from sqlalchemy import func, literal, or_, select
from sqlalchemy.sql.elements import ColumnElement

DEFAULT_ESCAPE = "\\"

# A field matcher turns an escaped "%token%" pattern into a boolean expression.
FieldMatcher = Callable[[str, str], ColumnElement]


def tokenize(search_text: str | None) -> List[str]:
    """Split search text on runs of whitespace (newlines included), dropping empties."""
    if not search_text:
        return []
    return search_text.strip().split()


def escape_like(token: str, escape: str = DEFAULT_ESCAPE) -> str:
    """
    Neutralize LIKE wildcards so the token matches literally.

    The escape character is doubled first, then "%" and "_" are prefixed with it.
    """
    return (
        token.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


def contains_pattern(token: str, escape: str = DEFAULT_ESCAPE) -> str:
    """LIKE pattern for "contains token"."""
    return f"%{escape_like(token, escape)}%"


def column_contains(column) -> FieldMatcher:
    """Matcher for a plain text column."""
    def match(pattern: str, escape: str) -> ColumnElement:
        return column.ilike(pattern, escape=escape)
    return match


def json_array_contains(column) -> FieldMatcher:
    """Matcher that is true when any element of a JSON string array column matches."""
    def match(pattern: str, escape: str) -> ColumnElement:
        elements = json_array_elements(column)
        return (
            select(literal(1))
            .select_from(elements)
            .where(elements.c.value.ilike(pattern, escape=escape))
            .exists()
        )
    return match


def json_array_elements(column, name: str | None = None):
    """Table-valued json_each() over a JSON array column, one row per element."""
    return func.json_each(column).table_valued("value", name=name)


def build_like_predicates(
    search_text: str | None,
    fields: Sequence[FieldMatcher],
    escape: str = DEFAULT_ESCAPE,
) -> List[ColumnElement]:
    """
    Build one OR-of-fields predicate per search token.

    Args:
        search_text: Raw user text; surrounding whitespace is ignored
        fields: Field matchers searched for every token
        escape: Escape character declared to LIKE

    Returns:
        Predicates in token order; empty for blank input
    """
    predicates: List[ColumnElement] = []
    for token in tokenize(search_text):
        pattern = contains_pattern(token, escape)
        predicates.append(or_(*(match(pattern, escape) for match in fields)))
    return predicates
