"""Base page source abstract class.

Architecture:
    BasePageSource is the single upstream capability the aggregation core
    consumes. A page source knows how to fetch one page of a collection for a
    cursor and how to resolve file asset ids; it knows nothing about caching,
    offset emulation or joins.

Design Decisions:
    - Abstract base class: the coordinator and services depend only on this
      interface, so tests swap in an in-memory source
    - Field filters are mandatory: every page request names the columns it reads
    - Async context manager: ensures HTTP sessions are closed

See Also:
    - PageCoordinator: Drives fetch_page across a whole traversal
    - MondayConnector: The aiohttp-backed implementation
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models import AssetRef, FieldFilter, Record, RemotePage


class BasePageSource(ABC):
    """Abstract upstream board API."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    async def fetch_page(
        self,
        collection_id: str,
        cursor: str | None,
        field_filter: FieldFilter,
    ) -> RemotePage:
        """Fetch one page of a collection.

        Args:
            collection_id: Board identifier
            cursor: Continuation cursor from the previous page (None for the first)
            field_filter: Columns (and nested records) to return

        Returns:
            RemotePage; ``cursor`` is None on the last page
        """
        ...

    @abstractmethod
    async def resolve_asset_refs(self, asset_ids: Iterable[str]) -> dict[str, AssetRef]:
        """Resolve file asset ids to URLs and names."""
        ...

    async def fetch_item(self, item_id: str, field_filter: FieldFilter) -> Record | None:
        """Fetch a single record by id."""
        raise NotImplementedError("fetch_item is not implemented for this source")

    async def list_groups(self, collection_id: str) -> list[tuple[str, str]]:
        """List (group_id, title) pairs of a collection."""
        raise NotImplementedError("list_groups is not implemented for this source")

    async def create_item(
        self,
        collection_id: str,
        *,
        name: str,
        group_id: str | None,
        column_values: dict[str, Any],
    ) -> str | None:
        """Create a record and return its id."""
        raise NotImplementedError("create_item is not implemented for this source")

    async def add_file_to_column(
        self,
        item_id: str,
        column_id: str,
        *,
        file_name: str,
        content: bytes,
        content_type: str = "image/jpeg",
    ) -> dict[str, Any]:
        """Attach a file to a file column."""
        raise NotImplementedError("add_file_to_column is not implemented for this source")

    async def close(self) -> None:
        """Release transport resources."""
        return None

    async def __aenter__(self) -> BasePageSource:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
