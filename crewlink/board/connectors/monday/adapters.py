"""Response adapters for Monday.com GraphQL responses."""

from __future__ import annotations

from typing import Any

from ...core.enums import FieldKind
from ...models import AssetRef, FieldFilter, FieldValue, Record, RemotePage


class ResponseAdapter:
    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        return response


def parse_fields(
    column_values: list[dict[str, Any]] | None,
    kinds: dict[str, FieldKind],
    keep_all: bool = False,
) -> dict[str, FieldValue]:
    """Typed field values for the requested columns.

    Other columns are dropped, unless ``keep_all`` is set, in which case they
    are kept as plain text.
    """
    fields: dict[str, FieldValue] = {}
    for cv in column_values or []:
        column_id = cv.get("id")
        if not column_id:
            continue
        kind = kinds.get(column_id)
        if kind is None:
            if not keep_all:
                continue
            kind = FieldKind.TEXT
        fields[column_id] = FieldValue.parse(column_id, kind, cv.get("text"), cv.get("value"))
    return fields


def parse_record(
    raw: dict[str, Any],
    kinds: dict[str, FieldKind],
    child_kinds: dict[str, FieldKind] | None = None,
    keep_all: bool = False,
) -> Record:
    group = raw.get("group") or {}
    children = None
    if child_kinds is not None:
        children = tuple(
            parse_record(sub, child_kinds) for sub in raw.get("subitems") or []
        )
    return Record(
        id=str(raw["id"]),
        name=raw.get("name") or "",
        group_title=group.get("title"),
        fields=parse_fields(raw.get("column_values"), kinds, keep_all),
        children=children,
    )


class ItemsPageAdapter(ResponseAdapter):
    def parse(self, response: Any, params: dict[str, Any]) -> RemotePage:
        field_filter: FieldFilter = params["field_filter"]
        boards = (response or {}).get("boards") or []
        page = (boards[0] if boards else {}).get("items_page") or {}
        child_kinds = field_filter.child_kinds() if field_filter.include_children else None
        kinds = field_filter.kinds()
        return RemotePage(
            items=tuple(
                parse_record(item, kinds, child_kinds, field_filter.all_fields)
                for item in page.get("items") or []
            ),
            cursor=page.get("cursor") or None,
        )


class ItemAdapter(ResponseAdapter):
    def parse(self, response: Any, params: dict[str, Any]) -> Record | None:
        items = (response or {}).get("items") or []
        if not items:
            return None
        return parse_record(items[0], params["field_filter"].kinds())


class AssetsAdapter(ResponseAdapter):
    def parse(self, response: Any, params: dict[str, Any]) -> dict[str, AssetRef]:
        out: dict[str, AssetRef] = {}
        for asset in (response or {}).get("assets") or []:
            asset_id = str(asset["id"])
            out[asset_id] = AssetRef(
                id=asset_id,
                url=asset.get("url") or None,
                public_url=asset.get("public_url") or None,
                name=asset.get("name") or "",
                extension=asset.get("file_extension") or "",
            )
        return out


class GroupsAdapter(ResponseAdapter):
    def parse(self, response: Any, params: dict[str, Any]) -> list[tuple[str, str]]:
        boards = (response or {}).get("boards") or []
        groups = (boards[0] if boards else {}).get("groups") or []
        return [(str(g["id"]), g.get("title") or "") for g in groups]


class CreateItemAdapter(ResponseAdapter):
    def parse(self, response: Any, params: dict[str, Any]) -> str | None:
        created = (response or {}).get("create_item") or {}
        item_id = created.get("id")
        return str(item_id) if item_id is not None else None
