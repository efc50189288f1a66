"""Timesheet models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..core.enums import TimesheetStatus


class TimesheetEntry(BaseModel):
    """A timesheet row as listed to the client."""

    id: str
    item_name: str = ""
    date_iso: str = ""
    start4: str = ""
    end4: str = ""
    total_hours: float = 0.0
    job_number: str = ""
    worker_name: str = ""
    notes: str = ""
    status: TimesheetStatus = TimesheetStatus.PENDING

    model_config = ConfigDict(frozen=True)


class TimesheetDraft(BaseModel):
    """Payload for creating a timesheet row."""

    email: str | None = None
    worker_name: str | None = None
    job_number: str | None = None
    date: str | None = None
    start_num: float | int | str | None = None
    end_num: float | int | str | None = None
    took_lunch: bool = False
    total_hours: float | int | str | None = None
    job_complete: bool = False
    notes: str | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
