"""Core components."""

from .base import BasePageSource
from .config import (
    BoardSettings,
    CacheSettings,
    ContractorColumns,
    JobColumns,
    MaterialsColumns,
    TimesheetColumns,
    load_settings,
)
from .enums import FieldKind, MaterialsMode, TimesheetStatus
from .exceptions import (
    BoardError,
    ConfigurationError,
    RateLimitError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)

__all__ = [
    "BasePageSource",
    "FieldKind",
    "MaterialsMode",
    "TimesheetStatus",
    # Settings
    "BoardSettings",
    "CacheSettings",
    "ContractorColumns",
    "JobColumns",
    "MaterialsColumns",
    "TimesheetColumns",
    "load_settings",
    # Exceptions
    "BoardError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "RateLimitError",
    "ConfigurationError",
    "ValidationError",
]
