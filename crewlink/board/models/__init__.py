"""Data models for board records and the results built from them.

Architecture:
    All models are Pydantic v2 and immutable (frozen=True). Results stored in
    the TTL cache are tuples of frozen models, so a cached value can never be
    mutated by a later request.

Model Categories:
    - Upstream: Record, FieldValue, RemotePage, FieldSpec, FieldFilter, FileRef
    - Joins: Identity, Assignment, AssignmentPage, LoginResult
    - Materials: JobTokens, MaterialLine, MaterialsResult
    - Timesheets: TimesheetEntry, TimesheetDraft
    - Details: AssetRef, DetailFile, JobDetails
"""

from .assignment import Assignment, AssignmentPage, Identity, LoginResult, normalize_email
from .details import AssetRef, DetailFile, JobDetails
from .materials import JobTokens, MaterialLine, MaterialsResult
from .record import FieldFilter, FieldSpec, FieldValue, FileRef, Record, RemotePage
from .timesheet import TimesheetDraft, TimesheetEntry

__all__ = [
    "AssetRef",
    "Assignment",
    "AssignmentPage",
    "DetailFile",
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
    "normalize_email",
]
