"""Monday.com GraphQL request specs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...models import FieldFilter
from .config import MAX_PAGE_SIZE


@dataclass(frozen=True)
class GraphQLSpec:
    id: str
    query: str
    variables: dict[str, Any]


def _column_values(variable: str, has_fields: bool) -> str:
    if not has_fields:
        return ""
    return f"column_values(ids: ${variable}) {{ id text value }}"


def items_page_spec(
    board_id: str, cursor: str | None, field_filter: FieldFilter
) -> GraphQLSpec:
    """One page of a board, reading only the filtered columns (or all of them)."""
    column_ids = [spec.id for spec in field_filter.fields]
    child_ids = [spec.id for spec in field_filter.child_fields or ()]

    selections = ["id", "name"]
    if field_filter.include_group:
        selections.append("group { id title }")
    if field_filter.all_fields:
        selections.append("column_values { id text value }")
        column_ids = []
    elif column_ids:
        selections.append(_column_values("columnIds", True))
    if field_filter.include_children:
        selections.append(
            "subitems { id name " + _column_values("childColumnIds", bool(child_ids)) + " }"
        )

    params = ["$boardId: ID!", "$cursor: String", "$limit: Int!"]
    variables: dict[str, Any] = {
        "boardId": board_id,
        "cursor": cursor,
        "limit": min(field_filter.page_size, MAX_PAGE_SIZE),
    }
    if column_ids:
        params.append("$columnIds: [String!]")
        variables["columnIds"] = column_ids
    if child_ids:
        params.append("$childColumnIds: [String!]")
        variables["childColumnIds"] = child_ids

    query = (
        f"query({', '.join(params)}) {{ boards(ids: [$boardId]) {{ "
        f"items_page(limit: $limit, cursor: $cursor) {{ cursor items {{ "
        f"{' '.join(selections)} }} }} }} }}"
    )
    return GraphQLSpec(id="items_page", query=query, variables=variables)


def item_spec(item_id: str, field_filter: FieldFilter) -> GraphQLSpec:
    """A single item by id."""
    column_ids = [spec.id for spec in field_filter.fields]
    params = ["$ids: [ID!]"]
    variables: dict[str, Any] = {"ids": [item_id]}
    if column_ids:
        params.append("$columnIds: [String!]")
        variables["columnIds"] = column_ids
    query = (
        f"query({', '.join(params)}) {{ items(ids: $ids) {{ id name "
        f"{_column_values('columnIds', bool(column_ids))} }} }}"
    )
    return GraphQLSpec(id="item", query=query, variables=variables)


def assets_spec(asset_ids: list[str]) -> GraphQLSpec:
    return GraphQLSpec(
        id="assets",
        query=(
            "query($ids: [ID!]!) { assets(ids: $ids) "
            "{ id url public_url name file_extension } }"
        ),
        variables={"ids": asset_ids},
    )


def groups_spec(board_id: str) -> GraphQLSpec:
    return GraphQLSpec(
        id="groups",
        query="query($id: [ID!]) { boards(ids: $id) { groups { id title } } }",
        variables={"id": [board_id]},
    )


def create_item_spec(
    board_id: str, name: str, group_id: str | None, column_values_json: str
) -> GraphQLSpec:
    return GraphQLSpec(
        id="create_item",
        query=(
            "mutation($boardId: ID!, $groupId: String, $itemName: String!, $columnVals: JSON!) "
            "{ create_item(board_id: $boardId, group_id: $groupId, item_name: $itemName, "
            "column_values: $columnVals) { id } }"
        ),
        variables={
            "boardId": board_id,
            "groupId": group_id,
            "itemName": name,
            "columnVals": column_values_json,
        },
    )


def add_file_query(item_id: int, column_id: str) -> str:
    """Multipart mutation; the file travels as ``variables[file]``.

    ``item_id`` and ``column_id`` are inlined, so callers must validate them.
    """
    return (
        "mutation ($file: File!) { "
        f'add_file_to_column(item_id: {item_id}, column_id: "{column_id}", file: $file) '
        "{ id } }"
    )
