"""Shared Monday.com API constants."""

from __future__ import annotations

API_URL = "https://api.monday.com/v2"
FILE_API_URL = "https://api.monday.com/v2/file"

# items_page accepts at most 500 items per request
MAX_PAGE_SIZE = 500
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRY_AFTER_SECONDS = 60
