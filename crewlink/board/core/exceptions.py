"""Custom exception hierarchy."""

from __future__ import annotations


class BoardError(Exception):
    """Base exception for all library errors."""

    pass


class UpstreamError(BoardError):
    """Error from the upstream board API.

    Raised when a page fetch (or any other upstream call) fails. A traversal
    that hits this error is aborted and nothing from it is cached.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Upstream call did not complete within its timeout."""

    def __init__(self, message: str, timeout: float | None = None) -> None:
        super().__init__(message, status_code=504)
        self.timeout = timeout


class RateLimitError(UpstreamError):
    """Upstream rate limit exceeded."""

    def __init__(self, message: str, retry_after: int = 60) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ConfigurationError(BoardError):
    """A required setting is missing or invalid."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class ValidationError(BoardError):
    """Caller input failed validation."""

    pass
