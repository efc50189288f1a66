"""Cursor paging layer.

Architecture:
    The paging layer consists of:
    - definitions.py: Query identity, traversal policy and window result
    - coordinator.py: Linked traversal, caching and offset emulation
    - telemetry.py: Structured logging

Usage:
    Services describe what they read with a PageQuery (collection + field
    filter) and hand it to the PageCoordinator. Nothing outside this package
    deals with cursors.
"""

from __future__ import annotations

from .coordinator import PageCoordinator
from .definitions import PagePolicy, PageQuery, PageWindow

__all__ = [
    "PageCoordinator",
    "PagePolicy",
    "PageQuery",
    "PageWindow",
]
