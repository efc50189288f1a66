"""Job token parsing and materials resolution.

A job number such as "2762-5 kitchen" carries a main job token ("2762") and a
sub-job token ("2762-5"). A job's scope status decides where its materials
come from:

    "only sub task materials"      -> sub-materials board, rows named after
                                      the sub token
    "include main scope materials" -> the main job's row on the parent
                                      materials board, minus its sub-job lines
    "no materials", empty, other   -> no materials

Sub-job lines ("2762-5 ...") are left out of the main-scope result because the
sub-materials board already lists them.
"""

from __future__ import annotations

import logging
import re

from ..core.config import MaterialsColumns
from ..core.enums import FieldKind, MaterialsMode
from ..models import FieldFilter, FieldSpec, JobTokens, MaterialLine, MaterialsResult, Record
from ..runtime.paging import PageCoordinator, PageQuery

logger = logging.getLogger(__name__)

SUB_TOKEN_PATTERN = re.compile(r"\b\d{4}-\d+\b")
MAIN_TOKEN_PATTERN = re.compile(r"\b\d{4}\b")

UNCATEGORISED = "Uncategorised"
NO_MATERIALS = "no materials"
ONLY_SUB_STATUS = "only sub task materials"
INCLUDE_MAIN_STATUS = "include main scope materials"


def split_job_tokens(text: str | None) -> JobTokens:
    """Extract main and sub job tokens from free text.

    Examples:
        >>> split_job_tokens("2762-5 kitchen")
        JobTokens(main_token='2762', sub_token='2762-5')
        >>> split_job_tokens("2762 kitchen")
        JobTokens(main_token='2762', sub_token='')
    """
    text = text or ""
    sub = SUB_TOKEN_PATTERN.search(text)
    if sub is not None:
        sub_token = sub.group(0)
        return JobTokens(main_token=sub_token.split("-", 1)[0], sub_token=sub_token)
    main = MAIN_TOKEN_PATTERN.search(text)
    return JobTokens(main_token=main.group(0) if main else "")


def select_mode(scope_status_text: str | None) -> MaterialsMode | None:
    """Map a scope status to a materials mode (None = no materials)."""
    status = (scope_status_text or "").strip().lower()
    if not status or NO_MATERIALS in status:
        return None
    if ONLY_SUB_STATUS in status:
        return MaterialsMode.ONLY_SUB
    if INCLUDE_MAIN_STATUS in status:
        return MaterialsMode.INCLUDE_MAIN
    return None


def group_by_status(lines: list[MaterialLine]) -> dict[str, tuple[MaterialLine, ...]]:
    """Group lines by status, keeping first-seen status order."""
    grouped: dict[str, list[MaterialLine]] = {}
    for line in lines:
        grouped.setdefault(line.status, []).append(line)
    return {status: tuple(group) for status, group in grouped.items()}


class MaterialsResolver:
    """Resolves the materials list for a job."""

    def __init__(
        self,
        coordinator: PageCoordinator,
        columns: MaterialsColumns,
        *,
        ttl: float | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._columns = columns
        self._ttl = ttl

    def _line_fields(self) -> tuple[FieldSpec, ...]:
        columns = self._columns
        specs = [
            FieldSpec(id=columns.title_column_id),
            FieldSpec(id=columns.notes_column_id),
            FieldSpec(id=columns.status_column_id),
        ]
        if columns.supplier_column_id:
            specs.append(FieldSpec(id=columns.supplier_column_id, kind=FieldKind.RELATION))
        return tuple(specs)

    def _to_line(self, record: Record) -> MaterialLine:
        columns = self._columns
        supplier = record.field(columns.supplier_column_id)
        return MaterialLine(
            id=record.id,
            name=record.name,
            title=record.text(columns.title_column_id),
            notes=record.text(columns.notes_column_id),
            status=record.text(columns.status_column_id).strip() or UNCATEGORISED,
            supplier_display=supplier.text if supplier is not None else "",
            supplier_ids=supplier.linked_ids if supplier is not None else (),
        )

    async def resolve_materials(
        self,
        job_number_text: str | None,
        scope_status_text: str | None,
    ) -> MaterialsResult | None:
        """Resolve a job's materials grouped by status.

        Args:
            job_number_text: Free text holding the job number (e.g. "2762-5 kitchen")
            scope_status_text: The job's scope status label

        Returns:
            MaterialsResult, or None when the job has no materials, the status is
            unrecognized, the needed token is missing, or materials columns are
            not configured

        Raises:
            UpstreamError: If a page fetch fails
        """
        if not self._columns.configured:
            return None
        mode = select_mode(scope_status_text)
        if mode is None:
            return None
        tokens = split_job_tokens(job_number_text)

        if mode is MaterialsMode.ONLY_SUB:
            if not tokens.sub_token or not self._columns.sub_board_id:
                return None
            lines = await self._sub_lines(tokens.sub_token)
        else:
            if not tokens.main_token or not self._columns.parent_board_id:
                return None
            lines = await self._main_lines(tokens.main_token)
            if lines is None:
                return None

        logger.debug(
            "materials_resolved",
            extra={"mode": mode.value, "tokens": tokens.model_dump(), "lines": len(lines)},
        )
        return MaterialsResult(mode=mode, by_status=group_by_status(lines))

    async def _sub_lines(self, sub_token: str) -> list[MaterialLine]:
        query = PageQuery(
            collection_id=self._columns.sub_board_id,
            field_filter=FieldFilter(fields=self._line_fields()),
        )
        records = await self._coordinator.collect(query, ttl=self._ttl)
        return [self._to_line(record) for record in records if record.name.startswith(sub_token)]

    async def _main_lines(self, main_token: str) -> list[MaterialLine] | None:
        query = PageQuery(
            collection_id=self._columns.parent_board_id,
            field_filter=FieldFilter(child_fields=self._line_fields()),
        )
        parent = await self._coordinator.find_first(
            query, lambda record: record.name.startswith(main_token)
        )
        if parent is None:
            return None
        sub_prefix = f"{main_token}-"
        return [
            self._to_line(child)
            for child in parent.children or ()
            if not child.name.startswith(sub_prefix)
        ]
