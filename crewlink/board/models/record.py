"""Board record, field and page models.

A column value arrives with two representations: the rendered ``text`` and a
raw structured ``value`` (usually a JSON string). The raw form is parsed once,
here, according to the FieldKind the query declared for that column. A value
that fails to parse is treated as empty and never propagates.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import FieldKind

logger = logging.getLogger(__name__)


class FileRef(BaseModel):
    """File attached to a file column."""

    name: str = "file"
    asset_id: str | None = None
    url: str | None = None

    model_config = ConfigDict(frozen=True)


class FieldSpec(BaseModel):
    """A column id a query reads, with the kind used to parse it."""

    id: str = Field(..., min_length=1)
    kind: FieldKind = FieldKind.TEXT

    model_config = ConfigDict(frozen=True)


class FieldFilter(BaseModel):
    """Restricts which columns (and nested records) a page request returns."""

    fields: tuple[FieldSpec, ...] = ()
    child_fields: tuple[FieldSpec, ...] | None = None  # None = children not requested
    include_group: bool = False
    all_fields: bool = False  # every top-level column; undeclared ones parse as TEXT
    page_size: int = Field(default=100, ge=1, le=500)

    model_config = ConfigDict(frozen=True)

    @property
    def include_children(self) -> bool:
        return self.child_fields is not None

    def kinds(self) -> dict[str, FieldKind]:
        return {spec.id: spec.kind for spec in self.fields}

    def child_kinds(self) -> dict[str, FieldKind]:
        return {spec.id: spec.kind for spec in self.child_fields or ()}

    def fingerprint(self) -> str:
        """Stable identity string, part of the query cache key."""
        fields = ",".join(f"{s.id}:{s.kind.value}" for s in self.fields)
        if self.child_fields is None:
            children = "-"
        else:
            children = ",".join(f"{s.id}:{s.kind.value}" for s in self.child_fields)
        return (
            f"f={fields}|c={children}|g={int(self.include_group)}"
            f"|a={int(self.all_fields)}|n={self.page_size}"
        )


def _load_raw(raw: Any) -> Any:
    if raw is None or raw == "":
        return None
    if isinstance(raw, (str, bytes)):
        return json.loads(raw)
    return raw


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


class FieldValue(BaseModel):
    """Typed column value.

    Only the parts matching ``kind`` are populated; ``text`` is the display
    fallback and is never parsed for structured kinds.
    """

    id: str
    kind: FieldKind = FieldKind.TEXT
    text: str = ""
    linked_ids: tuple[str, ...] = ()
    start: date | None = None
    end: date | None = None
    files: tuple[FileRef, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(
        cls, column_id: str, kind: FieldKind, text: str | None, raw: Any
    ) -> FieldValue:
        """Build a FieldValue from a column's rendered text and raw value.

        Args:
            column_id: Column identifier
            kind: Declared kind for this column
            text: Rendered text (may be None)
            raw: Raw structured value (JSON string, dict, or None)

        Returns:
            FieldValue; structured parts are empty if ``raw`` is malformed
        """
        text = text or ""
        if not kind.is_structured:
            return cls(id=column_id, kind=kind, text=text)
        try:
            payload = _load_raw(raw)
            if payload is None:
                return cls(id=column_id, kind=kind, text=text)
            if kind is FieldKind.RELATION:
                links = payload.get("linkedPulseIds") or payload.get("linkedItemIds") or []
                linked = (link.get("linkedPulseId", link.get("linkedItemId")) for link in links)
                linked_ids = tuple(str(link_id) for link_id in linked if link_id is not None)
                return cls(id=column_id, kind=kind, text=text, linked_ids=linked_ids)
            if kind is FieldKind.DATE_RANGE:
                start = _parse_date(payload.get("from"))
                end = _parse_date(payload.get("to")) or start
                return cls(id=column_id, kind=kind, text=text, start=start, end=end)
            if kind is FieldKind.DATE:
                day = _parse_date(payload.get("date"))
                return cls(id=column_id, kind=kind, text=text, start=day, end=day)
            files = tuple(
                FileRef(
                    name=str(entry.get("name") or "file"),
                    asset_id=str(entry["assetId"]) if entry.get("assetId") else None,
                    url=entry.get("url") or None,
                )
                for entry in payload.get("files") or []
            )
            return cls(id=column_id, kind=kind, text=text, files=files)
        except (ValueError, TypeError, AttributeError, KeyError) as exc:
            logger.debug(
                "malformed_field",
                extra={"column_id": column_id, "kind": kind.value, "error": str(exc)},
            )
            return cls(id=column_id, kind=kind, text=text)


class Record(BaseModel):
    """A board item, optionally with nested sub-items."""

    id: str
    name: str = ""
    group_title: str | None = None
    fields: dict[str, FieldValue] = Field(default_factory=dict)
    children: tuple[Record, ...] | None = None

    model_config = ConfigDict(frozen=True)

    def field(self, column_id: str | None) -> FieldValue | None:
        if not column_id:
            return None
        return self.fields.get(column_id)

    def text(self, column_id: str | None) -> str:
        """Rendered text of a column, or "" if absent."""
        value = self.field(column_id)
        return value.text if value is not None else ""


class RemotePage(BaseModel):
    """One page of a cursor-paginated query."""

    items: tuple[Record, ...] = ()
    cursor: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def exhausted(self) -> bool:
        return not self.cursor
