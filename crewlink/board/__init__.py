"""Crewlink Board - contractor jobs, materials and timesheets over Monday.com boards."""

from .api import BoardAPI
from .connectors.monday import GraphQLClient, MondayConnector
from .core import (
    BasePageSource,
    BoardError,
    BoardSettings,
    ConfigurationError,
    FieldKind,
    MaterialsMode,
    RateLimitError,
    TimesheetStatus,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
    load_settings,
)
from .models import (
    AssetRef,
    Assignment,
    AssignmentPage,
    FieldFilter,
    FieldSpec,
    FieldValue,
    FileRef,
    Identity,
    JobDetails,
    JobTokens,
    LoginResult,
    MaterialLine,
    MaterialsResult,
    Record,
    RemotePage,
    TimesheetDraft,
    TimesheetEntry,
)
from .runtime import PageCoordinator, PagePolicy, PageQuery, PageWindow, TTLCache
from .services import (
    AssignmentResolver,
    AuthService,
    DetailsService,
    MaterialsResolver,
    TimesheetService,
    classify_status,
    split_job_tokens,
)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "BoardAPI",
    # Connectors
    "GraphQLClient",
    "MondayConnector",
    # Core
    "BasePageSource",
    "BoardSettings",
    "FieldKind",
    "MaterialsMode",
    "TimesheetStatus",
    "load_settings",
    # Runtime
    "PageCoordinator",
    "PagePolicy",
    "PageQuery",
    "PageWindow",
    "TTLCache",
    # Services
    "AssignmentResolver",
    "AuthService",
    "DetailsService",
    "MaterialsResolver",
    "TimesheetService",
    "classify_status",
    "split_job_tokens",
    # Models
    "AssetRef",
    "Assignment",
    "AssignmentPage",
    "FieldFilter",
    "FieldSpec",
    "FieldValue",
    "FileRef",
    "Identity",
    "JobDetails",
    "JobTokens",
    "LoginResult",
    "MaterialLine",
    "MaterialsResult",
    "Record",
    "RemotePage",
    "TimesheetDraft",
    "TimesheetEntry",
    # Exceptions
    "BoardError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "RateLimitError",
    "ConfigurationError",
    "ValidationError",
]
