"""Shared fixtures: an in-memory page source, a fake clock and board settings."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

import pytest

from crewlink.board.core import (
    BasePageSource,
    BoardSettings,
    CacheSettings,
    ContractorColumns,
    JobColumns,
    MaterialsColumns,
    TimesheetColumns,
    UpstreamError,
)
from crewlink.board.models import AssetRef, FieldFilter, Record, RemotePage


class FakePageSource(BasePageSource):
    """Serves pre-built pages; the cursor is the next page index as a string."""

    def __init__(
        self,
        collections: dict[str, list[list[Record]]] | None = None,
        *,
        items: dict[str, Record] | None = None,
        assets: dict[str, AssetRef] | None = None,
        groups: dict[str, list[tuple[str, str]]] | None = None,
        fail_on: dict[str, int] | None = None,
        fail_assets: bool = False,
        delay: float = 0.0,
    ) -> None:
        super().__init__("fake")
        self.collections = collections or {}
        self.items = items or {}
        self.assets = assets or {}
        self.groups = groups or {}
        self.fail_on = fail_on or {}
        self.fail_assets = fail_assets
        self.delay = delay
        self.calls: list[tuple[str, str | None]] = []
        self.filters: list[FieldFilter] = []
        self.asset_calls: list[list[str]] = []
        self.created: list[dict[str, Any]] = []
        self.uploads: list[dict[str, Any]] = []
        self.closed = False

    async def fetch_page(
        self, collection_id: str, cursor: str | None, field_filter: FieldFilter
    ) -> RemotePage:
        self.calls.append((collection_id, cursor))
        self.filters.append(field_filter)
        if self.delay:
            await asyncio.sleep(self.delay)
        pages = self.collections.get(collection_id) or [[]]
        index = int(cursor) if cursor else 0
        if self.fail_on.get(collection_id) == index:
            raise UpstreamError(f"page {index} of {collection_id} failed", status_code=500)
        next_cursor = str(index + 1) if index + 1 < len(pages) else None
        return RemotePage(items=tuple(pages[index]), cursor=next_cursor)

    async def fetch_item(self, item_id: str, field_filter: FieldFilter) -> Record | None:
        return self.items.get(item_id)

    async def resolve_asset_refs(self, asset_ids: Iterable[str]) -> dict[str, AssetRef]:
        ids = list(asset_ids)
        self.asset_calls.append(ids)
        if self.fail_assets:
            raise UpstreamError("assets unavailable", status_code=500)
        return {asset_id: self.assets[asset_id] for asset_id in ids if asset_id in self.assets}

    async def list_groups(self, collection_id: str) -> list[tuple[str, str]]:
        return self.groups.get(collection_id, [])

    async def create_item(
        self,
        collection_id: str,
        *,
        name: str,
        group_id: str | None,
        column_values: dict[str, Any],
    ) -> str | None:
        self.created.append(
            {
                "collection_id": collection_id,
                "name": name,
                "group_id": group_id,
                "column_values": column_values,
            }
        )
        return str(9000 + len(self.created))

    async def add_file_to_column(
        self,
        item_id: str,
        column_id: str,
        *,
        file_name: str,
        content: bytes,
        content_type: str = "image/jpeg",
    ) -> dict[str, Any]:
        self.uploads.append(
            {"item_id": item_id, "column_id": column_id, "file_name": file_name, "content": content}
        )
        return {"data": {"add_file_to_column": {"id": "777"}}}

    async def close(self) -> None:
        self.closed = True

    def requests_for(self, collection_id: str) -> int:
        """Number of page requests issued against ``collection_id``."""
        return sum(1 for cid, _ in self.calls if cid == collection_id)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_source():
    """Factory for FakePageSource instances."""

    def _make(collections: dict[str, list[list[Record]]] | None = None, **kwargs: Any):
        return FakePageSource(collections, **kwargs)

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def contractor_columns() -> ContractorColumns:
    return ContractorColumns(board_id="contractors", email_column_id="email", pin_column_id="pin")


@pytest.fixture
def job_columns() -> JobColumns:
    return JobColumns(
        board_id="jobs",
        address_column_id="address",
        contractor_column_id="contractor",
        email_column_id="sub_email",
        timeline_column_id="timeline",
        job_number_column_id="job_no",
        description_column_id="desc",
        file_column_ids=("plans", "photos"),
    )


@pytest.fixture
def timesheet_columns() -> TimesheetColumns:
    return TimesheetColumns(
        board_id="timesheets",
        date_column_id="ts_date",
        name_column_id="ts_name",
        start_column_id="ts_start",
        finish_column_id="ts_finish",
        lunch_text_column_id="ts_lunch",
        job_number_column_id="ts_job",
        total_hours_column_id="ts_total",
        notes_column_id="ts_notes",
        job_complete_column_id="ts_complete",
    )


@pytest.fixture
def materials_columns() -> MaterialsColumns:
    return MaterialsColumns(
        sub_board_id="sub_materials",
        parent_board_id="parent_materials",
        title_column_id="m_title",
        notes_column_id="m_notes",
        status_column_id="m_status",
        supplier_column_id="m_supplier",
    )


@pytest.fixture
def settings(
    contractor_columns, job_columns, timesheet_columns, materials_columns
) -> BoardSettings:
    return BoardSettings(
        api_token="test-token",
        contractors=contractor_columns,
        jobs=job_columns,
        timesheets=timesheet_columns,
        materials=materials_columns,
        cache=CacheSettings(),
        upstream_timeout=5.0,
    )
