"""Page coordinator for cursor-paginated collections.

This module provides the PageCoordinator, which walks a collection page by
page, consults and populates the TTL cache per query identity, and emulates
offset/limit windows on top of a backend that only understands cursors.

Architecture:
    - pages(): one unbroken linked traversal; every other method builds on it
    - collect(): full traversal, cached by PageQuery.cache_key
    - find_first(): stops issuing requests at the first match
    - window(): bounded, filtered slice with early termination

Design Decisions:
    - Cursors are single-use pointers into an unstable server-side iteration,
      so a traversal is never resumed, retried or reordered
    - Only complete traversals are cached; any failure aborts and caches nothing
    - Callers never see cursors; "page N" of a filtered result always re-walks
      from the first upstream page
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import aclosing
from time import perf_counter
from typing import TYPE_CHECKING, TypeVar

from ...core.exceptions import BoardError, UpstreamError, UpstreamTimeoutError
from .definitions import PagePolicy, PageQuery, PageWindow
from .telemetry import log_cache_hit, log_page_error, log_page_fetched, log_traversal_complete

if TYPE_CHECKING:
    from ...core.base import BasePageSource
    from ...models import Record, RemotePage
    from ..cache import TTLCache

T = TypeVar("T")


class PageCoordinator:
    """Drives page requests against a BasePageSource.

    The coordinator holds no per-request state; one instance is shared by every
    service and request.
    """

    def __init__(
        self,
        source: BasePageSource,
        *,
        cache: TTLCache | None = None,
        policy: PagePolicy | None = None,
    ) -> None:
        """Initialize page coordinator.

        Args:
            source: Upstream page source
            cache: Optional TTL cache for complete traversal results
            policy: Traversal policy (timeout, max pages)
        """
        self._source = source
        self._cache = cache
        self._policy = policy or PagePolicy()

    @property
    def source(self) -> BasePageSource:
        return self._source

    @property
    def cache(self) -> TTLCache | None:
        return self._cache

    async def _fetch(self, query: PageQuery, cursor: str | None, page_index: int) -> RemotePage:
        start = perf_counter()
        try:
            page = await asyncio.wait_for(
                self._source.fetch_page(query.collection_id, cursor, query.field_filter),
                timeout=self._policy.timeout,
            )
        except asyncio.TimeoutError as exc:
            log_page_error(
                collection_id=query.collection_id,
                page_index=page_index,
                error_type="TimeoutError",
                error_message=f"page fetch exceeded {self._policy.timeout}s",
            )
            raise UpstreamTimeoutError(
                f"Page {page_index} of collection {query.collection_id} timed out",
                timeout=self._policy.timeout,
            ) from exc
        except BoardError as exc:
            log_page_error(
                collection_id=query.collection_id,
                page_index=page_index,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            raise
        except Exception as exc:
            log_page_error(
                collection_id=query.collection_id,
                page_index=page_index,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            raise UpstreamError(
                f"Page {page_index} of collection {query.collection_id} failed: {exc}"
            ) from exc

        log_page_fetched(
            collection_id=query.collection_id,
            page_index=page_index,
            items=len(page.items),
            has_cursor=not page.exhausted,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        return page

    async def pages(self, query: PageQuery) -> AsyncIterator[RemotePage]:
        """Yield pages of one linked traversal, first page first.

        Stopping iteration early stops issuing requests.

        Raises:
            UpstreamError: If a page fails, the cursor repeats, or max_pages is exceeded
        """
        cursor: str | None = None
        seen: set[str] = set()
        page_index = 0
        while True:
            if self._policy.max_pages is not None and page_index >= self._policy.max_pages:
                raise UpstreamError(
                    f"Collection {query.collection_id} exceeded {self._policy.max_pages} pages"
                )
            page = await self._fetch(query, cursor, page_index)
            page_index += 1
            yield page
            if page.exhausted:
                return
            if page.cursor in seen:
                raise UpstreamError(f"Collection {query.collection_id} returned a repeated cursor")
            seen.add(page.cursor)
            cursor = page.cursor

    async def collect(
        self,
        query: PageQuery,
        *,
        ttl: float | None = None,
        use_cache: bool = True,
    ) -> tuple[Record, ...]:
        """Return every record of a collection.

        Args:
            query: Query identity
            ttl: Cache TTL for the result (cache default if None)
            use_cache: Whether to read the cache before fetching

        Returns:
            All records in traversal order
        """
        key = query.cache_key
        if use_cache and self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                log_cache_hit(key=key)
                return cached

        start = perf_counter()
        records: list[Record] = []
        pages_fetched = 0
        async with aclosing(self.pages(query)) as pages:
            async for page in pages:
                pages_fetched += 1
                records.extend(page.items)

        result = tuple(records)
        if self._cache is not None:
            self._cache.set(key, result, ttl)
        log_traversal_complete(
            collection_id=query.collection_id,
            pages_fetched=pages_fetched,
            items=len(result),
            early_exit=False,
            total_latency_ms=(perf_counter() - start) * 1000.0,
        )
        return result

    async def find_first(
        self,
        query: PageQuery,
        predicate: Callable[[Record], bool],
    ) -> Record | None:
        """Return the first record matching ``predicate``.

        A cached full traversal of the same query is searched first; otherwise
        pages are fetched only until a match is found. Partial traversals are
        not cached.
        """
        if self._cache is not None:
            cached = self._cache.get(query.cache_key)
            if cached is not None:
                log_cache_hit(key=query.cache_key)
                return next((record for record in cached if predicate(record)), None)

        pages_fetched = 0
        found: Record | None = None
        exhausted = False
        async with aclosing(self.pages(query)) as pages:
            async for page in pages:
                pages_fetched += 1
                exhausted = page.exhausted
                found = next((record for record in page.items if predicate(record)), None)
                if found is not None:
                    break

        log_traversal_complete(
            collection_id=query.collection_id,
            pages_fetched=pages_fetched,
            items=int(found is not None),
            early_exit=found is not None and not exhausted,
        )
        return found

    async def window(
        self,
        query: PageQuery,
        select: Callable[[Record], Iterable[T]],
        *,
        offset: int = 0,
        limit: int | None = None,
        cache_key: str | None = None,
        ttl: float | None = None,
        count_all: bool = False,
    ) -> PageWindow[T]:
        """Return a bounded slice of the items selected from a traversal.

        ``select`` expands each record into zero or more logical items (for
        example the matching sub-items of a parent). Items are numbered in
        traversal order; the window is ``[offset, offset + limit)``.

        Once the window is full and ``offset + limit`` items have been seen, no
        further pages are requested. Items in pages already fetched are still
        counted into ``total``. With ``count_all`` the whole collection is
        walked so ``total`` is exact.

        Args:
            query: Query identity
            select: Record -> logical items
            offset: Items to skip
            limit: Window size (None = all items from offset)
            cache_key: Cache key for this window (None = not cached)
            ttl: Cache TTL for the window
            count_all: Walk every page to report an exact total

        Returns:
            PageWindow
        """
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if limit is not None and limit < 1:
            raise ValueError("limit must be None or a positive integer")

        if cache_key is not None and self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                log_cache_hit(key=cache_key)
                return cached

        start = perf_counter()
        items: list[T] = []
        total = 0
        pages_fetched = 0
        exhausted = False
        async with aclosing(self.pages(query)) as pages:
            async for page in pages:
                pages_fetched += 1
                for record in page.items:
                    for item in select(record):
                        if total >= offset and (limit is None or len(items) < limit):
                            items.append(item)
                        total += 1
                exhausted = page.exhausted
                if (
                    not count_all
                    and limit is not None
                    and len(items) == limit
                    and total >= offset + limit
                ):
                    break

        result: PageWindow[T] = PageWindow(
            items=tuple(items),
            total=total,
            offset=offset,
            limit=limit,
            has_more=total > offset + len(items) or not exhausted,
            pages_fetched=pages_fetched,
            exhausted=exhausted,
        )
        if cache_key is not None and self._cache is not None:
            self._cache.set(cache_key, result, ttl)
        log_traversal_complete(
            collection_id=query.collection_id,
            pages_fetched=pages_fetched,
            items=len(items),
            early_exit=not exhausted,
            total_latency_ms=(perf_counter() - start) * 1000.0,
        )
        return result
