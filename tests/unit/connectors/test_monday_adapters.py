"""Unit tests for Monday.com response adapters."""

import json

from crewlink.board.connectors.monday.adapters import (
    AssetsAdapter,
    CreateItemAdapter,
    GroupsAdapter,
    ItemAdapter,
    ItemsPageAdapter,
    parse_fields,
)
from crewlink.board.core import FieldKind
from crewlink.board.models import FieldFilter, FieldSpec


def _page_response(items, cursor=None):
    return {"boards": [{"items_page": {"cursor": cursor, "items": items}}]}


def test_parse_fields_drops_unrequested_columns():
    """Test only declared columns are kept and parsed by kind."""
    fields = parse_fields(
        [
            {"id": "link", "text": "Ann", "value": json.dumps({"linkedPulseIds": [{"linkedPulseId": 5}]})},
            {"id": "other", "text": "x", "value": None},
        ],
        {"link": FieldKind.RELATION},
    )
    assert list(fields) == ["link"]
    assert fields["link"].linked_ids == ("5",)


def test_parse_fields_keep_all():
    """Test undeclared columns are kept as text when asked."""
    fields = parse_fields(
        [
            {"id": "email", "text": "ann@x.io", "value": None},
            {"id": "text_pin", "text": "1234", "value": "\"1234\""},
        ],
        {"email": FieldKind.TEXT},
        keep_all=True,
    )
    assert list(fields) == ["email", "text_pin"]
    assert fields["text_pin"].kind == FieldKind.TEXT
    assert fields["text_pin"].text == "1234"


def test_items_page_adapter():
    """Test items, group titles and cursor are parsed."""
    field_filter = FieldFilter(fields=(FieldSpec(id="email"),), include_group=True)
    response = _page_response(
        [
            {
                "id": 1,
                "name": "Ann",
                "group": {"id": "g", "title": "Team"},
                "column_values": [{"id": "email", "text": "ann@x.io", "value": None}],
            }
        ],
        cursor="next",
    )

    page = ItemsPageAdapter().parse(response, {"field_filter": field_filter})

    assert page.cursor == "next"
    record = page.items[0]
    assert record.id == "1"
    assert record.group_title == "Team"
    assert record.text("email") == "ann@x.io"
    assert record.children is None


def test_items_page_adapter_children():
    """Test sub-items are parsed with the child kinds."""
    field_filter = FieldFilter(child_fields=(FieldSpec(id="tl", kind=FieldKind.DATE_RANGE),))
    timeline = json.dumps({"from": "2024-03-04", "to": "2024-03-08"})
    response = _page_response(
        [
            {
                "id": "p1",
                "name": "Parent",
                "subitems": [
                    {"id": "s1", "name": "Sub", "column_values": [{"id": "tl", "text": "", "value": timeline}]}
                ],
            },
            {"id": "p2", "name": "Empty", "subitems": None},
        ]
    )

    page = ItemsPageAdapter().parse(response, {"field_filter": field_filter})

    assert page.exhausted
    child = page.items[0].children[0]
    assert child.field("tl").start.isoformat() == "2024-03-04"
    assert child.field("tl").end.isoformat() == "2024-03-08"
    assert page.items[1].children == ()


def test_items_page_adapter_empty_board():
    """Test a missing board yields an empty, exhausted page."""
    page = ItemsPageAdapter().parse({"boards": []}, {"field_filter": FieldFilter()})
    assert page.items == ()
    assert page.exhausted


def test_item_adapter():
    """Test single item parsing and the not-found case."""
    field_filter = FieldFilter(fields=(FieldSpec(id="files", kind=FieldKind.FILES),))
    files = json.dumps({"files": [{"assetId": 9, "name": "plan.pdf"}]})
    response = {"items": [{"id": "7", "name": "Job", "column_values": [{"id": "files", "text": "", "value": files}]}]}

    record = ItemAdapter().parse(response, {"field_filter": field_filter})

    assert record.field("files").files[0].asset_id == "9"
    assert ItemAdapter().parse({"items": []}, {"field_filter": field_filter}) is None


def test_assets_adapter():
    """Test asset parsing keyed by id."""
    response = {
        "assets": [
            {"id": 1, "url": "https://u", "public_url": "", "name": "a.jpg", "file_extension": ".jpg"}
        ]
    }
    assets = AssetsAdapter().parse(response, {})
    assert assets["1"].url == "https://u"
    assert assets["1"].public_url is None
    assert assets["1"].extension == ".jpg"


def test_groups_and_create_adapters():
    """Test group listing and created item ids."""
    groups = GroupsAdapter().parse({"boards": [{"groups": [{"id": "g1", "title": "To Be Approved"}]}]}, {})
    assert groups == [("g1", "To Be Approved")]
    assert GroupsAdapter().parse({"boards": []}, {}) == []
    assert CreateItemAdapter().parse({"create_item": {"id": 55}}, {}) == "55"
    assert CreateItemAdapter().parse({}, {}) is None
