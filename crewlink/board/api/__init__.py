"""High-level API facade."""

from .board_api import BoardAPI

__all__ = ["BoardAPI"]
