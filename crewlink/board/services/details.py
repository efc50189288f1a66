"""Job sub-item file details and asset resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.base import BasePageSource
from ..core.config import JobColumns
from ..core.enums import FieldKind
from ..core.exceptions import UpstreamError
from ..models import AssetRef, DetailFile, FieldFilter, FieldSpec, JobDetails
from ..runtime.cache import TTLCache

logger = logging.getLogger(__name__)


class DetailsService:
    """Lists files on a job sub-item and resolves their download URLs.

    Asset metadata is immutable upstream, so resolved assets are cached per id
    with a long TTL.
    """

    def __init__(
        self,
        source: BasePageSource,
        columns: JobColumns,
        *,
        cache: TTLCache | None = None,
        assets_ttl: float | None = None,
    ) -> None:
        self._source = source
        self._columns = columns
        self._cache = cache
        self._assets_ttl = assets_ttl

    async def resolve_assets(self, asset_ids: Iterable[str]) -> dict[str, AssetRef]:
        """Resolve asset ids, serving cached ones without an upstream call."""
        unique = list(dict.fromkeys(str(asset_id) for asset_id in asset_ids if asset_id))
        resolved: dict[str, AssetRef] = {}
        missing: list[str] = []
        for asset_id in unique:
            cached = self._cache.get(f"asset:{asset_id}") if self._cache is not None else None
            if cached is not None:
                resolved[asset_id] = cached
            else:
                missing.append(asset_id)
        if missing:
            fetched = await self._source.resolve_asset_refs(missing)
            for asset_id, ref in fetched.items():
                resolved[asset_id] = ref
                if self._cache is not None:
                    self._cache.set(f"asset:{asset_id}", ref, self._assets_ttl)
        return resolved

    async def resolve_file_url(self, asset_id: str) -> str | None:
        """Best download URL of an asset (public URL preferred)."""
        assets = await self.resolve_assets([asset_id.strip()])
        ref = assets.get(asset_id.strip())
        return ref.best_url if ref is not None else None

    async def job_details(self, item_id: str) -> JobDetails:
        """Files on the configured file columns of a sub-item.

        Files without a URL are enriched through asset resolution; a failure
        there is logged and the files are returned without URLs.

        Raises:
            UpstreamError: If the item itself cannot be fetched
        """
        column_ids = self._columns.file_column_ids
        field_filter = FieldFilter(
            fields=tuple(FieldSpec(id=cid, kind=FieldKind.FILES) for cid in column_ids)
        )
        record = await self._source.fetch_item(str(item_id), field_filter)
        if record is None:
            return JobDetails(column_ids=column_ids)

        by_column = {
            cid: record.field(cid).files if record.field(cid) is not None else ()
            for cid in column_ids
        }
        asset_ids = [f.asset_id for files in by_column.values() for f in files if f.asset_id]
        assets: dict[str, AssetRef] = {}
        if asset_ids:
            try:
                assets = await self.resolve_assets(asset_ids)
            except UpstreamError as exc:
                logger.warning("asset_resolution_failed", extra={"error": str(exc)})

        files_by_column: dict[str, tuple[DetailFile, ...]] = {}
        for cid, files in by_column.items():
            detail_files = []
            for ref in files:
                url = ref.url
                if not url and ref.asset_id in assets:
                    url = assets[ref.asset_id].best_url
                detail_files.append(
                    DetailFile(column_id=cid, name=ref.name, asset_id=ref.asset_id, url=url)
                )
            files_by_column[cid] = tuple(detail_files)

        return JobDetails(
            item_id=record.id,
            item_name=record.name,
            files=tuple(f for group in files_by_column.values() for f in group),
            files_by_column=files_by_column,
            column_ids=column_ids,
        )
