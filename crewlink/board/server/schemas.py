"""Request and response bodies for the HTTP surface.

The mobile client speaks camelCase JSON; every body here uses a camelCase alias
generator and accepts field names too. Response views are built from the
core's frozen models and never carry upstream-only fields.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.enums import MaterialsMode, TimesheetStatus
from ..models import (
    Assignment,
    AssignmentPage,
    DetailFile,
    JobDetails,
    MaterialLine,
    MaterialsResult,
    TimesheetDraft,
    TimesheetEntry,
)
from ..runtime.cache import CacheEntryInfo


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests


class LoginRequest(CamelModel):
    email: str = ""
    pin: str = ""


class UploadRequest(CamelModel):
    job_id: str | int
    column_id: str = "files"
    file_name: str = "photo.jpg"
    content_base64: str = Field("", alias="base64")


class TimesheetRequest(CamelModel):
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

    def to_draft(self) -> TimesheetDraft:
        return TimesheetDraft(**self.model_dump())


# Responses


class HealthResponse(CamelModel):
    ok: bool = True


class TimelineView(CamelModel):
    start_date: str = ""
    end_date: str = ""


class JobView(CamelModel):
    parent_job_id: str
    parent_job_name: str
    address: str
    subitem_id: str
    subitem_name: str
    job_number: str
    description: str
    timeline: TimelineView

    @classmethod
    def from_assignment(cls, assignment: Assignment) -> JobView:
        start = assignment.timeline_start.isoformat() if assignment.timeline_start else ""
        end = assignment.timeline_end.isoformat() if assignment.timeline_end else start
        return cls(
            parent_job_id=assignment.parent_id,
            parent_job_name=assignment.parent_name,
            address=assignment.address,
            subitem_id=assignment.child_id,
            subitem_name=assignment.child_name,
            job_number=assignment.job_token,
            description=assignment.description,
            timeline=TimelineView(start_date=start, end_date=end),
        )


class JobsResponse(CamelModel):
    items: list[JobView]
    total: int
    page: int
    limit: int | None
    has_more: bool

    @classmethod
    def from_page(cls, page: AssignmentPage) -> JobsResponse:
        return cls(
            items=[JobView.from_assignment(a) for a in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            has_more=page.has_more,
        )


class ItemView(CamelModel):
    id: str
    name: str


class FileView(CamelModel):
    column_id: str
    name: str
    asset_id: str | None
    url: str | None

    @classmethod
    def from_file(cls, detail: DetailFile) -> FileView:
        return cls(
            column_id=detail.column_id,
            name=detail.name,
            asset_id=detail.asset_id,
            url=detail.url,
        )


class DetailsResponse(CamelModel):
    item: ItemView | None
    files: list[FileView]
    files_by_column: dict[str, list[FileView]]
    column_ids: list[str]

    @classmethod
    def from_details(cls, details: JobDetails) -> DetailsResponse:
        item = None
        if details.item_id is not None:
            item = ItemView(id=details.item_id, name=details.item_name)
        return cls(
            item=item,
            files=[FileView.from_file(f) for f in details.files],
            files_by_column={
                cid: [FileView.from_file(f) for f in files]
                for cid, files in details.files_by_column.items()
            },
            column_ids=list(details.column_ids),
        )


class MaterialLineView(CamelModel):
    id: str
    name: str
    title: str
    notes: str
    status: str
    supplier: str
    supplier_ids: list[str]

    @classmethod
    def from_line(cls, line: MaterialLine) -> MaterialLineView:
        return cls(
            id=line.id,
            name=line.name,
            title=line.title,
            notes=line.notes,
            status=line.status,
            supplier=line.supplier_display,
            supplier_ids=list(line.supplier_ids),
        )


class MaterialsResponse(CamelModel):
    mode: MaterialsMode | None = None
    by_status: dict[str, list[MaterialLineView]] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: MaterialsResult | None) -> MaterialsResponse:
        if result is None:
            return cls()
        return cls(
            mode=result.mode,
            by_status={
                status: [MaterialLineView.from_line(line) for line in lines]
                for status, lines in result.by_status.items()
            },
        )


class UploadResponse(CamelModel):
    ok: bool = True
    result: dict


class TimesheetCreated(CamelModel):
    ok: bool = True
    id: str | None


class TimesheetView(CamelModel):
    id: str
    item_name: str
    date_iso: str = Field(alias="dateISO")
    start4: str
    end4: str
    total_hours: float
    job_number: str
    worker_name: str
    notes: str
    status: TimesheetStatus

    @classmethod
    def from_entry(cls, entry: TimesheetEntry) -> TimesheetView:
        return cls(
            id=entry.id,
            item_name=entry.item_name,
            date_iso=entry.date_iso,
            start4=entry.start4,
            end4=entry.end4,
            total_hours=entry.total_hours,
            job_number=entry.job_number,
            worker_name=entry.worker_name,
            notes=entry.notes,
            status=entry.status,
        )


class TimesheetsResponse(CamelModel):
    items: list[TimesheetView]


class CacheEntryView(CamelModel):
    key: str
    remaining_ttl: float
    approx_size_bytes: int

    @classmethod
    def from_info(cls, info: CacheEntryInfo) -> CacheEntryView:
        return cls(
            key=info.key,
            remaining_ttl=info.remaining_ttl,
            approx_size_bytes=info.approx_size_bytes,
        )


class CacheResponse(CamelModel):
    count: int
    entries: list[CacheEntryView]
