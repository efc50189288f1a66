"""Structured logging for paging operations."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    collection_id: str,
    page_index: int,
    items: int,
    has_cursor: bool,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single page request.

    Args:
        collection_id: Collection identifier
        page_index: Zero-based index of the page within the traversal
        items: Number of records on the page
        has_cursor: Whether the page returned a continuation cursor
        latency_ms: Latency in milliseconds (optional)
    """
    logger.debug(
        "page_fetched",
        extra={
            "collection_id": collection_id,
            "page_index": page_index,
            "items": items,
            "has_cursor": has_cursor,
            "latency_ms": latency_ms,
        },
    )


def log_page_error(
    *,
    collection_id: str,
    page_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed page request; the traversal is aborted after this."""
    logger.error(
        "page_error",
        extra={
            "collection_id": collection_id,
            "page_index": page_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_traversal_complete(
    *,
    collection_id: str,
    pages_fetched: int,
    items: int,
    early_exit: bool,
    total_latency_ms: float | None = None,
) -> None:
    """Log the end of a traversal.

    Args:
        collection_id: Collection identifier
        pages_fetched: Page requests issued
        items: Records (or logical items) produced
        early_exit: Whether the traversal stopped before the last page
        total_latency_ms: Total latency in milliseconds (optional)
    """
    logger.info(
        "traversal_complete",
        extra={
            "collection_id": collection_id,
            "pages_fetched": pages_fetched,
            "items": items,
            "early_exit": early_exit,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_cache_hit(*, key: str) -> None:
    logger.debug("cache_hit", extra={"key": key})
