"""Core enumerations shared across the library.

Key Types:
    - FieldKind: How a column's raw value is interpreted at the adapter boundary
    - MaterialsMode: Which materials collection a job resolves against
    - TimesheetStatus: Approval state derived from a timesheet's group label
"""

from enum import Enum


class FieldKind(str, Enum):
    """Recognized column kinds.

    Every field a query reads is declared with one of these kinds, and the raw
    structured value is parsed once when the page is adapted. Read sites only
    see the typed parts of a FieldValue and never re-parse JSON.
    """

    TEXT = "text"
    RELATION = "relation"  # linkedPulseIds / linkedItemIds
    DATE_RANGE = "date_range"  # timeline {"from": ..., "to": ...}
    DATE = "date"  # {"date": ...}
    FILES = "files"  # {"files": [{"assetId": ..., "name": ...}]}

    @property
    def is_structured(self) -> bool:
        """Whether the raw value carries data beyond the rendered text."""
        return self is not FieldKind.TEXT


class MaterialsMode(str, Enum):
    """Materials resolution mode selected from a job's scope status."""

    ONLY_SUB = "only_sub"
    INCLUDE_MAIN = "include_main"


class TimesheetStatus(str, Enum):
    """Approval state of a timesheet row."""

    PENDING = "pending"
    APPROVED = "approved"
