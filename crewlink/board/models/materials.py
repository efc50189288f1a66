"""Job token and materials models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from ..core.enums import MaterialsMode


class JobTokens(BaseModel):
    """Main ("2762") and sub ("2762-5") job identifiers parsed from free text."""

    main_token: str = ""
    sub_token: str = ""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_prefix(self) -> JobTokens:
        if self.sub_token and self.sub_token.split("-", 1)[0] != self.main_token:
            raise ValueError("main_token must be the prefix of sub_token")
        return self


class MaterialLine(BaseModel):
    """One materials row."""

    id: str
    name: str = ""
    title: str = ""
    notes: str = ""
    status: str = "Uncategorised"
    supplier_display: str = ""
    supplier_ids: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class MaterialsResult(BaseModel):
    """Materials for a job grouped by status, in first-seen order."""

    mode: MaterialsMode
    by_status: dict[str, tuple[MaterialLine, ...]]

    model_config = ConfigDict(frozen=True)

    @property
    def lines(self) -> list[MaterialLine]:
        return [line for group in self.by_status.values() for line in group]
