"""Settings loaded from environment variables.

Board and column ids come from the deployment environment. Only the API token,
the contractors board (with its email column) and the jobs board are required;
every other column id is optional, and a feature whose columns are missing is
disabled rather than failing.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ContractorColumns:
    """Contractors board (identities)."""

    board_id: str
    email_column_id: str
    pin_column_id: str | None = None


@dataclass(frozen=True)
class JobColumns:
    """Jobs board (parents) and its sub-item columns (assignments)."""

    board_id: str
    address_column_id: str | None = None
    contractor_column_id: str | None = None
    email_column_id: str | None = None
    timeline_column_id: str | None = None
    job_number_column_id: str | None = None
    description_column_id: str | None = None
    file_column_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class TimesheetColumns:
    """Timesheet board columns."""

    board_id: str | None = None
    date_column_id: str | None = None
    name_column_id: str | None = None
    start_column_id: str | None = None
    finish_column_id: str | None = None
    lunch_text_column_id: str | None = None
    lunch_dropdown_column_id: str | None = None
    job_number_column_id: str | None = None
    total_hours_column_id: str | None = None
    notes_column_id: str | None = None
    job_complete_column_id: str | None = None
    photos_column_id: str | None = None


@dataclass(frozen=True)
class MaterialsColumns:
    """Sub-materials and parent-materials boards."""

    sub_board_id: str | None = None
    parent_board_id: str | None = None
    title_column_id: str | None = None
    notes_column_id: str | None = None
    status_column_id: str | None = None
    supplier_column_id: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.title_column_id and self.notes_column_id and self.status_column_id)


@dataclass(frozen=True)
class CacheSettings:
    """TTLs in seconds per kind of cached result."""

    default_ttl: float = 60.0
    identities_ttl: float = 300.0
    assignments_ttl: float = 60.0
    materials_ttl: float = 120.0
    timesheets_ttl: float = 30.0
    assets_ttl: float = 3600.0


@dataclass(frozen=True)
class BoardSettings:
    """Typed settings for the board service."""

    api_token: str
    contractors: ContractorColumns
    jobs: JobColumns
    timesheets: TimesheetColumns = field(default_factory=TimesheetColumns)
    materials: MaterialsColumns = field(default_factory=MaterialsColumns)
    cache: CacheSettings = field(default_factory=CacheSettings)
    upstream_timeout: float = 30.0
    port: int = 4000


def _optional(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name, "").strip()
    return value or None


def _required(env: Mapping[str, str], name: str) -> str:
    value = _optional(env, name)
    if value is None:
        raise ConfigurationError(f"{name} must be set.", setting=name)
    return value


def _number(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _optional(env, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.", setting=name) from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive.", setting=name)
    return value


def _csv(env: Mapping[str, str], name: str) -> tuple[str, ...]:
    raw = env.get(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def load_settings(environ: Mapping[str, str] | None = None) -> BoardSettings:
    """Build settings from the environment.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        BoardSettings

    Raises:
        ConfigurationError: If a required variable is missing or malformed
    """
    env = os.environ if environ is None else environ

    contractors = ContractorColumns(
        board_id=_required(env, "CONTRACTORS_BOARD_ID"),
        email_column_id=_required(env, "CONTRACTORS_EMAIL_COLUMN_ID"),
        pin_column_id=_optional(env, "CONTRACTORS_PIN_TEXT_COLUMN_ID"),
    )
    jobs = JobColumns(
        board_id=_required(env, "JOBS_BOARD_ID"),
        address_column_id=_optional(env, "JOBS_ADDRESS_COLUMN_ID"),
        contractor_column_id=_optional(env, "SUBITEMS_CONTRACTOR_COLUMN_ID"),
        email_column_id=_optional(env, "SUBITEMS_EMAIL_COLUMN_ID"),
        timeline_column_id=_optional(env, "SUBITEMS_TIMELINE_COLUMN_ID"),
        job_number_column_id=_optional(env, "SUBITEMS_JOBNUMBER_COLUMN_ID"),
        description_column_id=_optional(env, "SUBITEMS_DESCRIPTION_COLUMN_ID"),
        file_column_ids=_csv(env, "SUBITEMS_FILE_COLUMN_IDS"),
    )
    timesheets = TimesheetColumns(
        board_id=_optional(env, "TIMESHEETS_BOARD_ID"),
        date_column_id=_optional(env, "TS_DATE_COLUMN_ID"),
        name_column_id=_optional(env, "TS_NAME_COLUMN_ID"),
        start_column_id=_optional(env, "TS_START_NUM_COLUMN_ID"),
        finish_column_id=_optional(env, "TS_FINISH_NUM_COLUMN_ID"),
        lunch_text_column_id=_optional(env, "TS_LUNCH_TEXT_COLUMN_ID"),
        lunch_dropdown_column_id=_optional(env, "TS_LUNCH_BOOL_DROPDOWN_ID"),
        job_number_column_id=_optional(env, "TS_JOBNUMBER_TEXT_COLUMN_ID"),
        total_hours_column_id=_optional(env, "TS_TOTAL_HOURS_NUM_COLUMN_ID"),
        notes_column_id=_optional(env, "TS_NOTES_LONGTEXT_COLUMN_ID"),
        job_complete_column_id=_optional(env, "TS_JOB_COMPLETE_TEXT_COLUMN_ID"),
        photos_column_id=_optional(env, "TS_PHOTOS_FILE_COLUMN_ID"),
    )
    materials = MaterialsColumns(
        sub_board_id=_optional(env, "MATERIALS_SUB_BOARD_ID"),
        parent_board_id=_optional(env, "MATERIALS_PARENT_BOARD_ID"),
        title_column_id=_optional(env, "MATERIALS_TITLE_COLUMN_ID"),
        notes_column_id=_optional(env, "MATERIALS_NOTES_COLUMN_ID"),
        status_column_id=_optional(env, "MATERIALS_STATUS_COLUMN_ID"),
        supplier_column_id=_optional(env, "MATERIALS_SUPPLIER_COLUMN_ID"),
    )
    defaults = CacheSettings()
    cache = CacheSettings(
        default_ttl=_number(env, "CACHE_DEFAULT_TTL_SECONDS", defaults.default_ttl),
        identities_ttl=_number(env, "CACHE_IDENTITIES_TTL_SECONDS", defaults.identities_ttl),
        assignments_ttl=_number(env, "CACHE_ASSIGNMENTS_TTL_SECONDS", defaults.assignments_ttl),
        materials_ttl=_number(env, "CACHE_MATERIALS_TTL_SECONDS", defaults.materials_ttl),
        timesheets_ttl=_number(env, "CACHE_TIMESHEETS_TTL_SECONDS", defaults.timesheets_ttl),
        assets_ttl=_number(env, "CACHE_ASSETS_TTL_SECONDS", defaults.assets_ttl),
    )

    return BoardSettings(
        api_token=_required(env, "MONDAY_TOKEN"),
        contractors=contractors,
        jobs=jobs,
        timesheets=timesheets,
        materials=materials,
        cache=cache,
        upstream_timeout=_number(env, "UPSTREAM_TIMEOUT_SECONDS", 30.0),
        port=int(_number(env, "PORT", 4000)),
    )
