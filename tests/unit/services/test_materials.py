"""Unit tests for job token parsing and materials resolution."""

from __future__ import annotations

import json

import pytest

from crewlink.board.core import FieldKind, MaterialsColumns, MaterialsMode, UpstreamError
from crewlink.board.models import FieldValue, MaterialLine, Record
from crewlink.board.runtime import PageCoordinator, TTLCache
from crewlink.board.services import (
    MaterialsResolver,
    group_by_status,
    select_mode,
    split_job_tokens,
)

ONLY_SUB = "Only Sub Task Materials"
INCLUDE_MAIN = "Include Main Scope Materials"


def _line(
    item_id: str, name: str, *, status: str = "", supplier_ids: tuple[int, ...] = ()
) -> Record:
    fields = {
        "m_title": FieldValue(id="m_title", text=f"title {item_id}"),
        "m_notes": FieldValue(id="m_notes", text=f"notes {item_id}"),
        "m_status": FieldValue(id="m_status", text=status),
    }
    if supplier_ids:
        raw = json.dumps({"linkedPulseIds": [{"linkedPulseId": i} for i in supplier_ids]})
        fields["m_supplier"] = FieldValue.parse("m_supplier", FieldKind.RELATION, "Acme", raw)
    return Record(id=item_id, name=name, fields=fields)


class TestSplitJobTokens:
    """Test token extraction from free text."""

    @pytest.mark.parametrize(
        "text,main,sub",
        [
            ("2762-5 kitchen", "2762", "2762-5"),
            ("Job 2762-12", "2762", "2762-12"),
            ("2762 kitchen", "2762", ""),
            ("kitchen 2762", "2762", ""),
            ("27625-1 too long", "", ""),
            ("no digits", "", ""),
            ("", "", ""),
            (None, "", ""),
        ],
    )
    def test_tokens(self, text, main, sub):
        """Test representative job numbers."""
        tokens = split_job_tokens(text)
        assert tokens.main_token == main
        assert tokens.sub_token == sub

    def test_sub_token_prefix_is_main(self):
        """Test the sub token always starts with the main token."""
        tokens = split_job_tokens("re 1234-7 and 5678")
        assert tokens.sub_token.split("-")[0] == tokens.main_token == "1234"


class TestSelectMode:
    """Test scope status to mode mapping."""

    @pytest.mark.parametrize(
        "status,mode",
        [
            (ONLY_SUB, MaterialsMode.ONLY_SUB),
            ("  only sub task materials ", MaterialsMode.ONLY_SUB),
            (INCLUDE_MAIN, MaterialsMode.INCLUDE_MAIN),
            ("No Materials", None),
            ("", None),
            (None, None),
            ("Something else", None),
        ],
    )
    def test_modes(self, status, mode):
        """Test each recognized label and the fallbacks."""
        assert select_mode(status) is mode


class TestGroupByStatus:
    """Test status grouping."""

    def test_first_seen_order(self):
        """Test groups keep first-seen order and row order."""
        lines = [
            MaterialLine(id="1", status="Ordered"),
            MaterialLine(id="2", status="Delivered"),
            MaterialLine(id="3", status="Ordered"),
        ]
        grouped = group_by_status(lines)
        assert list(grouped) == ["Ordered", "Delivered"]
        assert [line.id for line in grouped["Ordered"]] == ["1", "3"]


class TestMaterialsResolver:
    """Test materials resolution against sub and parent boards."""

    @pytest.fixture
    def sub_board(self):
        return {
            "sub_materials": [
                [
                    _line("1", "2762-5 Timber", status="Ordered", supplier_ids=(40,)),
                    _line("2", "2762-6 Paint", status="Ordered"),
                ],
                [
                    _line("3", "2762-5 Nails"),
                    _line("4", "Other 2762-5"),
                ],
            ]
        }

    @pytest.fixture
    def parent_board(self):
        main = Record(
            id="p2",
            name="2762 Smith House",
            children=(
                _line("c1", "2762 Bricks", status="Delivered"),
                _line("c2", "2762-5 Timber", status="Ordered"),
                _line("c3", "Sand", status="Ordered"),
            ),
        )
        return {
            "parent_materials": [
                [Record(id="p1", name="1111 Other", children=())],
                [main],
                [Record(id="p3", name="2762 Duplicate", children=(_line("x", "Dup"),))],
            ]
        }

    @pytest.mark.asyncio
    async def test_only_sub_mode(self, make_source, materials_columns, sub_board):
        """Test sub-materials rows are selected by sub token prefix."""
        source = make_source(sub_board)
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        result = await resolver.resolve_materials("2762-5 kitchen", ONLY_SUB)

        assert result.mode is MaterialsMode.ONLY_SUB
        assert [line.id for line in result.lines] == ["1", "3"]
        assert list(result.by_status) == ["Ordered", "Uncategorised"]
        timber = result.by_status["Ordered"][0]
        assert timber.title == "title 1"
        assert timber.supplier_ids == ("40",)
        assert timber.supplier_display == "Acme"

    @pytest.mark.asyncio
    async def test_only_sub_without_sub_token(self, make_source, materials_columns, sub_board):
        """Test a job number without a sub token yields nothing."""
        source = make_source(sub_board)
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        assert await resolver.resolve_materials("2762 kitchen", ONLY_SUB) is None
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_include_main_mode(self, make_source, materials_columns, parent_board):
        """Test main-scope lines exclude sub-job lines and stop at the first parent."""
        source = make_source(parent_board)
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        result = await resolver.resolve_materials("2762-5", INCLUDE_MAIN)

        assert result.mode is MaterialsMode.INCLUDE_MAIN
        assert [line.id for line in result.lines] == ["c1", "c3"]
        assert list(result.by_status) == ["Delivered", "Ordered"]
        assert source.requests_for("parent_materials") == 2

    @pytest.mark.asyncio
    async def test_include_main_requests_child_columns(
        self, make_source, materials_columns, parent_board
    ):
        """Test the parent query asks for sub-items with the line columns."""
        source = make_source(parent_board)
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        await resolver.resolve_materials("2762", INCLUDE_MAIN)

        field_filter = source.filters[0]
        assert field_filter.include_children
        assert set(field_filter.child_kinds()) == {"m_title", "m_notes", "m_status", "m_supplier"}

    @pytest.mark.asyncio
    async def test_include_main_parent_not_found(self, make_source, materials_columns, parent_board):
        """Test an unknown main token yields None."""
        source = make_source(parent_board)
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        assert await resolver.resolve_materials("9999", INCLUDE_MAIN) is None
        assert source.requests_for("parent_materials") == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["No materials", "", "Pending quote"])
    async def test_no_materials_makes_no_requests(
        self, make_source, materials_columns, sub_board, status
    ):
        """Test statuses without materials never touch upstream."""
        source = make_source(sub_board)
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        assert await resolver.resolve_materials("2762-5", status) is None
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_unconfigured_columns(self, make_source, sub_board):
        """Test missing materials columns disable the feature."""
        source = make_source(sub_board)
        resolver = MaterialsResolver(
            PageCoordinator(source), MaterialsColumns(sub_board_id="sub_materials")
        )

        assert await resolver.resolve_materials("2762-5", ONLY_SUB) is None
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_sub_board_cached(self, make_source, materials_columns, sub_board, clock):
        """Test the sub-materials traversal is reused across jobs."""
        source = make_source(sub_board)
        coordinator = PageCoordinator(source, cache=TTLCache(clock=clock))
        resolver = MaterialsResolver(coordinator, materials_columns, ttl=120)

        await resolver.resolve_materials("2762-5", ONLY_SUB)
        second = await resolver.resolve_materials("2762-6", ONLY_SUB)

        assert [line.id for line in second.lines] == ["2"]
        assert source.requests_for("sub_materials") == 2

    @pytest.mark.asyncio
    async def test_upstream_failure_propagates(self, make_source, materials_columns, sub_board):
        """Test a failed page surfaces as UpstreamError."""
        source = make_source(sub_board, fail_on={"sub_materials": 1})
        resolver = MaterialsResolver(PageCoordinator(source), materials_columns)

        with pytest.raises(UpstreamError):
            await resolver.resolve_materials("2762-5", ONLY_SUB)
