"""
Tagboard Backend - Row Aggregator
==================================

What:  Groups flat join rows into one nested object per parent.
Who:   Message and grad services, after fetching a JOIN ordered by parent id.
When:  Between the database fetch and response serialization.

Example:
    rows = [
        {"id": 1, "text": "first", "tag": "funny"},
        {"id": 1, "text": "first", "tag": "happy"},
        {"id": 2, "text": "second", "tag": "silly"},
    ]
    aggregate(rows, child_field="tag", children_key="tags")
    → [
        {"id": 1, "text": "first", "tags": ["funny", "happy"]},
        {"id": 2, "text": "second", "tags": ["silly"]},
      ]

Grouping:
    Parents are looked up by identifier in a dict, never by comparing with the
    previous row or by using the identifier as a list index. Interleaved rows
    for the same parent therefore land in the same children list, and gaps or
    non-numeric identifiers are handled the same as dense integers.

Guarantees:
    - One output object per distinct identifier, in first-appearance order
    - Children keep input order; no sorting or de-duplication
    - Parent fields are taken from the first row seen for that parent
    - Input rows are never mutated
    - Any invalid row aborts the whole call with InvalidRowError
"""

import uuid
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Sequence

from tagboard.exceptions import InvalidRowError

# Identifier types that hash and compare the way database keys do.
# bool is excluded explicitly below since it is a subclass of int.
VALID_KEY_TYPES = (int, str, uuid.UUID)


def _check_row(row: Any, index: int, key: str, child_field: str, children_key: str) -> Any:
    """Validate one row and return its parent identifier."""
    if not isinstance(row, Mapping):
        raise InvalidRowError(
            message=f"Row {index} is not a mapping",
            index=index,
            context={"row_type": type(row).__name__},
        )
    if key not in row:
        raise InvalidRowError(
            message=f"Row {index} has no '{key}' column",
            index=index,
            context={"columns": list(row.keys())},
        )
    if child_field not in row:
        raise InvalidRowError(
            message=f"Row {index} has no '{child_field}' column",
            index=index,
            context={"columns": list(row.keys())},
        )
    if children_key != child_field and children_key in row:
        raise InvalidRowError(
            message=f"Row {index} already has a '{children_key}' column",
            index=index,
            context={"columns": list(row.keys())},
        )

    parent_id = row[key]
    if parent_id is None or isinstance(parent_id, bool) or not isinstance(parent_id, VALID_KEY_TYPES):
        raise InvalidRowError(
            message=f"Row {index} has an unusable '{key}' value: {parent_id!r}",
            index=index,
            context={"value_type": type(parent_id).__name__},
        )
    return parent_id


def aggregate(
    rows: Iterable[Mapping],
    *,
    key: str = "id",
    child_field: str,
    children_key: str,
    drop_null_children: bool = False,
) -> List[Dict[str, Any]]:
    """
    Nest the `child_field` values of each row under its parent.

    Args:
        rows:               Join rows (dicts or SQLAlchemy RowMapping), expected
                            sorted by `key` but not required to be
        key:                Column holding the parent identifier
        child_field:        Column holding the child value for this row
        children_key:       Output key for the list of child values
        drop_null_children: Skip None child values, as produced by a LEFT JOIN
                            for a parent with no children. The parent is still
                            emitted, with an empty list.

    Returns:
        A fully built list of parent dicts: `key`, then the remaining parent
        columns in row order, then `children_key`.

    Raises:
        InvalidRowError: On the first row that is not a mapping, lacks `key`
                         or `child_field`, already has a `children_key`
                         column, or whose identifier is None, a bool, or not
                         an int, str or UUID.
    """
    parents: List[Dict[str, Any]] = []
    by_id: Dict[Any, Dict[str, Any]] = {}

    for index, row in enumerate(rows):
        parent_id = _check_row(row, index, key, child_field, children_key)

        parent = by_id.get(parent_id)
        if parent is None:
            parent = {key: parent_id}
            for column, value in row.items():
                if column not in (key, child_field):
                    parent[column] = value
            parent[children_key] = []
            by_id[parent_id] = parent
            parents.append(parent)

        child = row[child_field]
        if child is None and drop_null_children:
            continue
        parent[children_key].append(child)

    return parents


def flatten(
    parents: Sequence[Mapping],
    *,
    key: str = "id",
    children_key: str,
    child_field: str,
) -> List[Dict[str, Any]]:
    """
    Expand nested parents back into one row per (parent, child) pair.

    Inverse of `aggregate` for parents that have at least one child; a parent
    with an empty children list produces no rows. Each row starts with `key`.

    Raises:
        InvalidRowError: A parent has no `key` field.
    """
    rows: List[Dict[str, Any]] = []
    for index, parent in enumerate(parents):
        if key not in parent:
            raise InvalidRowError(
                message=f"Parent {index} has no '{key}' field",
                index=index,
                context={"fields": list(parent.keys())},
            )
        fields = {key: parent[key]}
        for column, value in parent.items():
            if column not in (key, children_key):
                fields[column] = value
        for child in parent[children_key]:
            row = dict(fields)
            row[child_field] = child
            rows.append(row)
    return rows
