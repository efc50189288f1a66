"""BoardAPI facade over the aggregation services.

The BoardAPI is the single object the HTTP layer (or a script) talks to. It
owns the page source, the shared TTL cache, the page coordinator and every
service built on them.

Architecture:
    This module implements the Facade pattern. BoardAPI handles:
    - Wiring: one source, one cache, one coordinator shared by all services
    - TTL selection per kind of cached result
    - Resource lifecycle management

Design Decisions:
    - Source and cache injection allows testing with an in-memory source
    - The cache is process-wide and shared across requests; services never
      hold per-request state
    - Context manager pattern ensures the upstream session is closed

See Also:
    - PageCoordinator: Paging and caching of upstream collections
    - MondayConnector: Default upstream page source
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from ..connectors.monday import MondayConnector
from ..runtime.cache import CacheEntryInfo, TTLCache
from ..runtime.paging import PageCoordinator, PagePolicy
from ..services import (
    AssignmentResolver,
    AuthService,
    DetailsService,
    MaterialsResolver,
    TimesheetService,
)

if TYPE_CHECKING:
    from ..core.base import BasePageSource
    from ..core.config import BoardSettings
    from ..models import (
        AssignmentPage,
        JobDetails,
        LoginResult,
        MaterialsResult,
        TimesheetDraft,
        TimesheetEntry,
    )

logger = logging.getLogger(__name__)


class BoardAPI:
    """High-level facade for contractor, job, materials and timesheet lookups.

    Example:
        >>> async with BoardAPI(load_settings()) as api:
        ...     page = await api.my_jobs("a@x.io", on_date="2024-03-05", limit=20)
        ...     for assignment in page.items:
        ...         print(assignment.child_name)
    """

    def __init__(
        self,
        settings: BoardSettings,
        *,
        source: BasePageSource | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        """Initialize the BoardAPI.

        Args:
            settings: Board ids, column ids and TTLs
            source: Optional page source (creates a MondayConnector if not provided)
            cache: Optional TTL cache (creates one with the default TTL if not provided)
        """
        self._settings = settings
        self._owns_source = source is None
        self._source = source or MondayConnector(
            settings.api_token, timeout=settings.upstream_timeout
        )
        ttls = settings.cache
        self._cache = cache if cache is not None else TTLCache(ttls.default_ttl)
        self._coordinator = PageCoordinator(
            self._source,
            cache=self._cache,
            policy=PagePolicy(timeout=settings.upstream_timeout),
        )
        self._assignments = AssignmentResolver(
            self._coordinator,
            settings.contractors,
            settings.jobs,
            identities_ttl=ttls.identities_ttl,
            assignments_ttl=ttls.assignments_ttl,
        )
        self._auth = AuthService(self._coordinator, settings.contractors)
        self._materials = MaterialsResolver(
            self._coordinator, settings.materials, ttl=ttls.materials_ttl
        )
        self._details = DetailsService(
            self._source, settings.jobs, cache=self._cache, assets_ttl=ttls.assets_ttl
        )
        self._timesheets = TimesheetService(
            self._coordinator, settings.timesheets, ttl=ttls.timesheets_ttl
        )
        self._closed = False

    @property
    def settings(self) -> BoardSettings:
        return self._settings

    @property
    def cache(self) -> TTLCache:
        return self._cache

    async def login(self, email: str, pin: str) -> LoginResult:
        """Verify a contractor's email and PIN."""
        return await self._auth.verify_login(email, pin)

    async def my_jobs(
        self,
        email: str,
        *,
        on_date: date | str | None = None,
        include_weekends: bool = True,
        page: int = 1,
        limit: int | None = None,
        count_all: bool = False,
    ) -> AssignmentPage:
        """Job sub-items assigned to the contractor with ``email``."""
        return await self._assignments.resolve_assignments_for(
            email,
            on_date=on_date,
            include_weekends=include_weekends,
            page=page,
            limit=limit,
            count_all=count_all,
        )

    async def job_details(self, item_id: str) -> JobDetails:
        """Files attached to a job sub-item."""
        return await self._details.job_details(item_id)

    async def materials(
        self, job_number: str | None, scope_status: str | None
    ) -> MaterialsResult | None:
        """Materials for a job, or None when the job has none."""
        return await self._materials.resolve_materials(job_number, scope_status)

    async def file_url(self, asset_id: str) -> str | None:
        """Download URL for a file asset."""
        return await self._details.resolve_file_url(asset_id)

    async def upload(
        self,
        item_id: str,
        content: bytes,
        *,
        column_id: str = "files",
        file_name: str = "photo.jpg",
        content_type: str = "image/jpeg",
    ) -> dict[str, Any]:
        """Attach a file to a record's file column."""
        return await self._source.add_file_to_column(
            item_id,
            column_id,
            file_name=file_name,
            content=content,
            content_type=content_type,
        )

    async def list_timesheets(
        self,
        *,
        name: str | None = None,
        job_number: str | None = None,
        limit: int = 50,
    ) -> list[TimesheetEntry]:
        """Timesheets, newest first."""
        return await self._timesheets.list_timesheets(
            name=name, job_number=job_number, limit=limit
        )

    async def create_timesheet(self, draft: TimesheetDraft) -> str | None:
        """Create a timesheet awaiting approval and return its id."""
        return await self._timesheets.create_timesheet(draft)

    def cache_entries(self) -> list[CacheEntryInfo]:
        """Live cache entries, longest remaining TTL first."""
        return self._cache.list_entries()

    async def close(self) -> None:
        """Close the API and clean up resources."""
        if self._closed:
            return
        if self._owns_source:
            await self._source.close()
        self._closed = True
        logger.debug("board_api_closed")

    async def __aenter__(self) -> BoardAPI:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
