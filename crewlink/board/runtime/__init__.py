"""Runtime: TTL cache and cursor paging."""

from .cache import CacheEntry, CacheEntryInfo, TTLCache, measure_size
from .paging import PageCoordinator, PagePolicy, PageQuery, PageWindow

__all__ = [
    "CacheEntry",
    "CacheEntryInfo",
    "TTLCache",
    "measure_size",
    "PageCoordinator",
    "PagePolicy",
    "PageQuery",
    "PageWindow",
]
