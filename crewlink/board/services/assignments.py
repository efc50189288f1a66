"""Contractor to job sub-item matching.

Joins a contractor (found by email on the contractors board) to the sub-items
of the jobs board that are assigned to them. A sub-item is assigned when its
relation column links the contractor's item id, or when its email column
holds the contractor's email. The relation is checked first, but either one
is a match.

Request Flow:
    1. Full, cached traversal of the contractors board; first email match wins
    2. Windowed traversal of the jobs board with sub-items
    3. Optional single-day filter against each sub-item's timeline
    4. 1-based page over the filtered matches, in parent-then-child order
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, datetime, time, timezone

from ..core.config import ContractorColumns, JobColumns
from ..core.enums import FieldKind
from ..core.exceptions import ValidationError
from ..models import (
    Assignment,
    AssignmentPage,
    FieldFilter,
    FieldSpec,
    Identity,
    Record,
    normalize_email,
)
from ..runtime.paging import PageCoordinator, PageQuery

logger = logging.getLogger(__name__)

CONTRACTORS_PAGE_SIZE = 100
JOBS_PAGE_SIZE = 50


def contractors_query(columns: ContractorColumns) -> PageQuery:
    """Query reading the contractors board's email (and PIN) columns."""
    fields = [FieldSpec(id=columns.email_column_id)]
    if columns.pin_column_id:
        fields.append(FieldSpec(id=columns.pin_column_id))
    return PageQuery(
        collection_id=columns.board_id,
        field_filter=FieldFilter(fields=tuple(fields), page_size=CONTRACTORS_PAGE_SIZE),
    )


def jobs_query(columns: JobColumns) -> PageQuery:
    """Query reading job parents with the sub-item columns used for matching."""
    parent_fields = []
    if columns.address_column_id:
        parent_fields.append(FieldSpec(id=columns.address_column_id))
    child_specs = [
        (columns.contractor_column_id, FieldKind.RELATION),
        (columns.email_column_id, FieldKind.TEXT),
        (columns.timeline_column_id, FieldKind.DATE_RANGE),
        (columns.job_number_column_id, FieldKind.TEXT),
        (columns.description_column_id, FieldKind.TEXT),
    ]
    child_fields = tuple(FieldSpec(id=cid, kind=kind) for cid, kind in child_specs if cid)
    return PageQuery(
        collection_id=columns.board_id,
        field_filter=FieldFilter(
            fields=tuple(parent_fields),
            child_fields=child_fields,
            page_size=JOBS_PAGE_SIZE,
        ),
    )


def parse_day(value: date | str | None) -> date | None:
    """Parse a YYYY-MM-DD day; empty input means no day."""
    if value is None or isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def is_weekend(day: date) -> bool:
    """Saturday or Sunday, evaluated in UTC at noon."""
    anchored = datetime.combine(day, time(12, 0), tzinfo=timezone.utc)
    return anchored.weekday() >= 5


class AssignmentResolver:
    """Resolves the job sub-items assigned to a contractor."""

    def __init__(
        self,
        coordinator: PageCoordinator,
        contractors: ContractorColumns,
        jobs: JobColumns,
        *,
        identities_ttl: float | None = None,
        assignments_ttl: float | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._contractors = contractors
        self._jobs = jobs
        self._identities_ttl = identities_ttl
        self._assignments_ttl = assignments_ttl
        self._contractors_query = contractors_query(contractors)
        self._jobs_query = jobs_query(jobs)

    async def find_identity(self, email: str) -> Identity | None:
        """Return the contractor whose email column matches ``email``.

        The whole board is scanned (and cached) because the email may sit on
        any page. Returns None if nobody matches.
        """
        email_key = normalize_email(email)
        if not email_key:
            return None
        records = await self._coordinator.collect(
            self._contractors_query, ttl=self._identities_ttl
        )
        for record in records:
            if normalize_email(record.text(self._contractors.email_column_id)) == email_key:
                return Identity(id=record.id, name=record.name, email_key=email_key)
        return None

    def matches(self, child: Record, identity: Identity) -> bool:
        """Whether a sub-item is assigned to ``identity``."""
        link = child.field(self._jobs.contractor_column_id)
        if link is not None and identity.id in link.linked_ids:
            return True
        if self._jobs.email_column_id:
            return normalize_email(child.text(self._jobs.email_column_id)) == identity.email_key
        return False

    def _to_assignment(self, parent: Record, child: Record, identity: Identity) -> Assignment:
        timeline = child.field(self._jobs.timeline_column_id)
        start = timeline.start if timeline is not None else None
        end = timeline.end if timeline is not None else None
        return Assignment(
            parent_id=parent.id,
            parent_name=parent.name,
            address=parent.text(self._jobs.address_column_id),
            identity_id=identity.id,
            child_id=child.id,
            child_name=child.name,
            job_token=child.text(self._jobs.job_number_column_id),
            description=child.text(self._jobs.description_column_id),
            timeline_start=start,
            timeline_end=end or start,
        )

    def _select(self, identity: Identity, on_date: date | None):
        def select(parent: Record) -> Iterator[Assignment]:
            for child in parent.children or ():
                if not self.matches(child, identity):
                    continue
                assignment = self._to_assignment(parent, child, identity)
                if on_date is not None and not assignment.covers(on_date):
                    continue
                yield assignment

        return select

    async def resolve_assignments_for(
        self,
        email: str,
        *,
        on_date: date | str | None = None,
        include_weekends: bool = True,
        page: int = 1,
        limit: int | None = None,
        count_all: bool = False,
    ) -> AssignmentPage:
        """Return one page of the sub-items assigned to ``email``.

        Args:
            email: Contractor email (case and surrounding space ignored)
            on_date: Only sub-items whose timeline covers this day
            include_weekends: If False and ``on_date`` is a weekend, nothing matches
            page: 1-based page number
            limit: Page size (None = all matches)
            count_all: Read every jobs page so ``total`` is exact

        Returns:
            AssignmentPage; empty when the email matches no contractor

        Raises:
            ValidationError: If page/limit/on_date are invalid
            UpstreamError: If a page fetch fails
        """
        if page < 1:
            raise ValidationError("page must be >= 1")
        if limit is not None and limit < 1:
            raise ValidationError("limit must be a positive integer")
        day = parse_day(on_date)

        identity = await self.find_identity(email)
        if identity is None:
            logger.info("identity_not_found", extra={"board_id": self._contractors.board_id})
            return AssignmentPage(page=page, limit=limit)

        if day is not None and not include_weekends and is_weekend(day):
            return AssignmentPage(page=page, limit=limit)

        offset = (page - 1) * limit if limit is not None else 0
        cache_key = (
            f"assignments:{self._jobs.board_id}:{identity.id}:"
            f"{day.isoformat() if day else '-'}:{page}:{limit}:{int(count_all)}"
        )
        window = await self._coordinator.window(
            self._jobs_query,
            self._select(identity, day),
            offset=offset,
            limit=limit,
            cache_key=cache_key,
            ttl=self._assignments_ttl,
            count_all=count_all,
        )
        return AssignmentPage(
            items=window.items,
            total=window.total,
            page=page,
            limit=limit,
            has_more=window.has_more,
        )
