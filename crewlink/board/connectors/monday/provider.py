"""Monday.com page source.

This connector implements BasePageSource on top of the GraphQL API. It can be
used directly (without the page coordinator) for one-off scripts, but it does
no caching and no traversal of its own: one call, one upstream request.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from typing import Any

from ...core.base import BasePageSource
from ...core.exceptions import ValidationError
from ...models import AssetRef, FieldFilter, Record, RemotePage
from .adapters import (
    AssetsAdapter,
    CreateItemAdapter,
    GroupsAdapter,
    ItemAdapter,
    ItemsPageAdapter,
)
from .client import GraphQLClient
from .config import DEFAULT_TIMEOUT_SECONDS
from .queries import (
    add_file_query,
    assets_spec,
    create_item_spec,
    groups_spec,
    item_spec,
    items_page_spec,
)

logger = logging.getLogger(__name__)

_COLUMN_ID_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


class MondayConnector(BasePageSource):
    """BasePageSource backed by the Monday.com GraphQL API."""

    def __init__(
        self,
        token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: GraphQLClient | None = None,
    ) -> None:
        """Initialize connector.

        Args:
            token: API token sent as a bearer token
            timeout: Per-request timeout in seconds
            client: Optional preconfigured GraphQL client
        """
        super().__init__("monday")
        self._client = client or GraphQLClient(token, timeout=timeout)

    async def fetch_page(
        self,
        collection_id: str,
        cursor: str | None,
        field_filter: FieldFilter,
    ) -> RemotePage:
        spec = items_page_spec(collection_id, cursor, field_filter)
        data = await self._client.execute(spec.query, spec.variables)
        return ItemsPageAdapter().parse(data, {"field_filter": field_filter})

    async def fetch_item(self, item_id: str, field_filter: FieldFilter) -> Record | None:
        spec = item_spec(item_id, field_filter)
        data = await self._client.execute(spec.query, spec.variables)
        return ItemAdapter().parse(data, {"field_filter": field_filter})

    async def resolve_asset_refs(self, asset_ids: Iterable[str]) -> dict[str, AssetRef]:
        unique = list(dict.fromkeys(str(asset_id) for asset_id in asset_ids if asset_id))
        if not unique:
            return {}
        spec = assets_spec(unique)
        data = await self._client.execute(spec.query, spec.variables)
        return AssetsAdapter().parse(data, {})

    async def list_groups(self, collection_id: str) -> list[tuple[str, str]]:
        spec = groups_spec(collection_id)
        data = await self._client.execute(spec.query, spec.variables)
        return GroupsAdapter().parse(data, {})

    async def create_item(
        self,
        collection_id: str,
        *,
        name: str,
        group_id: str | None,
        column_values: dict[str, Any],
    ) -> str | None:
        spec = create_item_spec(collection_id, name, group_id, json.dumps(column_values))
        data = await self._client.execute(spec.query, spec.variables)
        return CreateItemAdapter().parse(data, {})

    async def add_file_to_column(
        self,
        item_id: str,
        column_id: str,
        *,
        file_name: str,
        content: bytes,
        content_type: str = "image/jpeg",
    ) -> dict[str, Any]:
        """Attach a file to a file column.

        Raises:
            ValidationError: If the item id is not numeric or the column id is malformed
        """
        if not str(item_id).isdigit():
            raise ValidationError(f"Invalid item id {item_id!r}")
        if not _COLUMN_ID_PATTERN.match(column_id):
            raise ValidationError(f"Invalid column id {column_id!r}")
        logger.info(
            "file_upload",
            extra={"item_id": item_id, "column_id": column_id, "bytes": len(content)},
        )
        return await self._client.upload(
            add_file_query(int(item_id), column_id),
            content=content,
            file_name=file_name,
            content_type=content_type,
        )

    async def close(self) -> None:
        await self._client.close()
