"""Job details and file asset models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AssetRef(BaseModel):
    """Resolved upstream file asset."""

    id: str
    url: str | None = None
    public_url: str | None = None
    name: str = ""
    extension: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def best_url(self) -> str | None:
        return self.public_url or self.url


class DetailFile(BaseModel):
    """A file on a job sub-item, with the URL resolved when possible."""

    column_id: str
    name: str = "file"
    asset_id: str | None = None
    url: str | None = None

    model_config = ConfigDict(frozen=True)


class JobDetails(BaseModel):
    """Files attached to a job sub-item."""

    item_id: str | None = None
    item_name: str = ""
    files: tuple[DetailFile, ...] = ()
    files_by_column: dict[str, tuple[DetailFile, ...]] = Field(default_factory=dict)
    column_ids: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)
