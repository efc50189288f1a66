"""HTTP surface."""

from .app import create_app, get_board_api

__all__ = ["create_app", "get_board_api"]
