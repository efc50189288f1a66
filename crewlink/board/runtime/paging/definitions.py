"""Paging metadata definitions.

This module defines the query identity, traversal policy and window result
used by the PageCoordinator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ...models import FieldFilter

T = TypeVar("T")


@dataclass(frozen=True)
class PagePolicy:
    """Traversal policy.

    Attributes:
        timeout: Seconds allowed for a single page fetch
        max_pages: Maximum pages per traversal (None = unlimited)
    """

    timeout: float = 30.0
    max_pages: int | None = None

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("PagePolicy timeout must be positive")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("PagePolicy max_pages must be None or a positive integer")


@dataclass(frozen=True)
class PageQuery:
    """Logical query identity: a collection plus the columns it reads.

    Two queries with the same collection and field filter share one cache
    entry, whatever page a caller is after.
    """

    collection_id: str
    field_filter: FieldFilter = field(default_factory=FieldFilter)

    @property
    def cache_key(self) -> str:
        return f"records:{self.collection_id}:{self.field_filter.fingerprint()}"


@dataclass(frozen=True)
class PageWindow(Generic[T]):
    """Bounded slice of a filtered traversal.

    Attributes:
        items: Logical items in ``[offset, offset + limit)``
        total: Matching items seen across every page fetched
        offset: Index of the first returned item
        limit: Window size (None = everything from offset)
        has_more: More matches were seen, or pages were left unread
        pages_fetched: Upstream page requests issued
        exhausted: Traversal reached the last page
    """

    items: tuple[T, ...]
    total: int
    offset: int = 0
    limit: int | None = None
    has_more: bool = False
    pages_fetched: int = 0
    exhausted: bool = True
