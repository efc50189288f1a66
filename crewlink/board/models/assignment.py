"""Identity and assignment models."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


def normalize_email(value: str | None) -> str:
    """Lower-case and trim an email for comparison."""
    return (value or "").strip().lower()


class Identity(BaseModel):
    """A contractor located by email on the contractors board."""

    id: str = Field(..., min_length=1)
    name: str = ""
    email_key: str

    model_config = ConfigDict(frozen=True)


class Assignment(BaseModel):
    """A job sub-item joined to the contractor it was matched for."""

    parent_id: str
    parent_name: str = ""
    address: str = ""
    identity_id: str
    child_id: str
    child_name: str = ""
    job_token: str = ""
    description: str = ""
    timeline_start: date | None = None
    timeline_end: date | None = None

    model_config = ConfigDict(frozen=True)

    def covers(self, day: date) -> bool:
        """Whether ``day`` falls inside the timeline (end defaults to start)."""
        if self.timeline_start is None:
            return False
        end = self.timeline_end or self.timeline_start
        return self.timeline_start <= day <= end


class AssignmentPage(BaseModel):
    """One 1-based page of assignments.

    ``total`` counts matches in the jobs pages actually read. When ``has_more``
    is set it is a lower bound, unless the page was resolved with ``count_all``.
    """

    items: tuple[Assignment, ...] = ()
    total: int = 0
    page: int = 1
    limit: int | None = None
    has_more: bool = False

    model_config = ConfigDict(frozen=True)


class LoginResult(BaseModel):
    """Outcome of an email + PIN check."""

    ok: bool
    name: str = ""

    model_config = ConfigDict(frozen=True)
