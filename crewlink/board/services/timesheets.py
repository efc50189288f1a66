"""Timesheet listing and creation."""

from __future__ import annotations

import logging
import re
from typing import Any

from ..core.config import TimesheetColumns
from ..core.enums import FieldKind
from ..core.exceptions import ConfigurationError
from ..models import FieldFilter, FieldSpec, Record, TimesheetDraft, TimesheetEntry
from ..runtime.paging import PageCoordinator, PageQuery
from .status import classify_status

logger = logging.getLogger(__name__)

PENDING_GROUP_TITLE = "to be approved"
MAX_LIST_LIMIT = 200


def to_four_digits(value: Any) -> str:
    """Clock time as four digits ("730" -> "0730"); "" if no digits."""
    digits = re.sub(r"\D", "", str(value if value is not None else ""))
    if not digits:
        return ""
    return digits.zfill(4)[:4]


def parse_hours(text: str) -> float:
    """Parse an hours figure, accepting a decimal comma; 0.0 if unparseable."""
    try:
        return float(text.strip().replace(",", "."))
    except ValueError:
        return 0.0


def _number_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


class TimesheetService:
    """Lists and creates timesheet rows."""

    def __init__(
        self,
        coordinator: PageCoordinator,
        columns: TimesheetColumns,
        *,
        ttl: float | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._columns = columns
        self._ttl = ttl

    def _query(self) -> PageQuery:
        columns = self._columns
        specs = [
            (columns.name_column_id, FieldKind.TEXT),
            (columns.job_number_column_id, FieldKind.TEXT),
            (columns.date_column_id, FieldKind.DATE),
            (columns.start_column_id, FieldKind.TEXT),
            (columns.finish_column_id, FieldKind.TEXT),
            (columns.total_hours_column_id, FieldKind.TEXT),
            (columns.notes_column_id, FieldKind.TEXT),
        ]
        return PageQuery(
            collection_id=columns.board_id,
            field_filter=FieldFilter(
                fields=tuple(FieldSpec(id=cid, kind=kind) for cid, kind in specs if cid),
                include_group=True,
            ),
        )

    def _to_entry(self, record: Record) -> TimesheetEntry:
        columns = self._columns
        date_value = record.field(columns.date_column_id)
        day = date_value.start if date_value is not None else None
        return TimesheetEntry(
            id=record.id,
            item_name=record.name,
            date_iso=day.isoformat() if day else "",
            start4=to_four_digits(record.text(columns.start_column_id)),
            end4=to_four_digits(record.text(columns.finish_column_id)),
            total_hours=parse_hours(record.text(columns.total_hours_column_id)),
            job_number=record.text(columns.job_number_column_id),
            worker_name=record.text(columns.name_column_id),
            notes=record.text(columns.notes_column_id),
            status=classify_status(record.group_title),
        )

    async def list_timesheets(
        self,
        *,
        name: str | None = None,
        job_number: str | None = None,
        limit: int = 50,
    ) -> list[TimesheetEntry]:
        """List timesheets, newest first.

        Args:
            name: Worker name filter (rows without a name are kept)
            job_number: Exact job number filter
            limit: Maximum rows, clamped to 1..200

        Returns:
            Entries sorted by date then finish time, both descending
        """
        if not self._columns.board_id:
            return []
        name = (name or "").strip()
        job_number = (job_number or "").strip()
        limit = max(1, min(MAX_LIST_LIMIT, limit))

        records = await self._coordinator.collect(self._query(), ttl=self._ttl)
        entries = []
        for record in records:
            entry = self._to_entry(record)
            if name and entry.worker_name and entry.worker_name.strip() != name:
                continue
            if job_number and entry.job_number.strip() != job_number:
                continue
            entries.append(entry)

        entries.sort(key=lambda e: (e.date_iso, int(e.end4 or 0)), reverse=True)
        return entries[:limit]

    async def find_group_id(self, title_fragment: str) -> str | None:
        """Id of the first group whose title contains ``title_fragment``.

        Falls back to the board's first group.
        """
        groups = await self._coordinator.source.list_groups(self._columns.board_id)
        needle = title_fragment.lower()
        for group_id, title in groups:
            if needle in (title or "").lower():
                return group_id
        return groups[0][0] if groups else None

    def build_column_values(self, draft: TimesheetDraft) -> dict[str, Any]:
        """Column values for the configured columns only."""
        columns = self._columns
        values: dict[str, Any] = {}
        if columns.name_column_id and draft.worker_name:
            values[columns.name_column_id] = draft.worker_name
        if columns.job_number_column_id and draft.job_number:
            values[columns.job_number_column_id] = draft.job_number
        if columns.date_column_id and draft.date:
            values[columns.date_column_id] = {"date": draft.date}
        if columns.start_column_id and _has_value(draft.start_num):
            values[columns.start_column_id] = _number_text(draft.start_num)
        if columns.finish_column_id and _has_value(draft.end_num):
            values[columns.finish_column_id] = _number_text(draft.end_num)

        lunch = "Yes" if draft.took_lunch else "No"
        if columns.lunch_text_column_id:
            values[columns.lunch_text_column_id] = lunch
        elif columns.lunch_dropdown_column_id:
            values[columns.lunch_dropdown_column_id] = {"labels": [lunch]}

        if columns.total_hours_column_id and _has_value(draft.total_hours):
            values[columns.total_hours_column_id] = _number_text(draft.total_hours)
        if columns.notes_column_id and draft.notes is not None:
            values[columns.notes_column_id] = draft.notes
        if columns.job_complete_column_id:
            values[columns.job_complete_column_id] = "Yes" if draft.job_complete else "No"
        return values

    async def create_timesheet(self, draft: TimesheetDraft) -> str | None:
        """Create a timesheet row in the "to be approved" group.

        Returns:
            The new item id (None if upstream did not return one)

        Raises:
            ConfigurationError: If no timesheet board is configured
            UpstreamError: If the upstream call fails
        """
        if not self._columns.board_id:
            raise ConfigurationError("TIMESHEETS_BOARD_ID not set", setting="TIMESHEETS_BOARD_ID")

        group_id = await self.find_group_id(PENDING_GROUP_TITLE)
        item_name = f"{draft.job_number or 'Timesheet'} — {draft.date or ''}"
        item_id = await self._coordinator.source.create_item(
            self._columns.board_id,
            name=item_name,
            group_id=group_id,
            column_values=self.build_column_values(draft),
        )
        cache = self._coordinator.cache
        if cache is not None:
            cache.invalidate_prefix(f"records:{self._columns.board_id}:")
        logger.info("timesheet_created", extra={"item_id": item_id, "group_id": group_id})
        return item_id
