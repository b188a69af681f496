"""Tests for dashboard document loading."""

import json

import pytest

from cardgrid.core.config import LayoutConfig
from cardgrid.core.errors import CardValidationError
from cardgrid.core.loader import load_dashboard_file, parse_dashboard

DOC = {
    "title": "Sales overview",
    "description": "Generated",
    "groups": {"sales": {"title": "Sales"}},
    "cards": [
        {"id": "c1", "title": "Revenue", "score": 90, "position": 0, "group": "sales"},
        {"id": "c2", "title": "Orders", "score": 50, "position": 1, "width": 12, "height": 3},
    ],
}


def test_parse_builds_spec_and_cards():
    spec, cards = parse_dashboard(DOC)
    assert spec.title == "Sales overview"
    assert spec.groups["sales"].title == "Sales"
    assert [c.id for c in cards] == ["c1", "c2"]
    assert (cards[0].width, cards[0].height) == (6, 4)
    assert (cards[1].width, cards[1].height) == (12, 3)
    assert cards[0].group == "sales"


def test_default_size_follows_config():
    _, cards = parse_dashboard(DOC, LayoutConfig(default_card_width=4, default_card_height=2))
    assert (cards[0].width, cards[0].height) == (4, 2)


@pytest.mark.parametrize(
    "patch",
    [
        {"score": "nan"},
        {"position": "inf"},
        {"width": 0},
        {"group": "missing"},
        {"colour": "red"},
    ],
)
def test_invalid_cards_are_rejected(patch):
    doc = json.loads(json.dumps(DOC))
    doc["cards"][0].update(patch)
    with pytest.raises(CardValidationError) as exc:
        parse_dashboard(doc)
    assert exc.value.problems


def test_missing_title_is_reported():
    doc = dict(DOC)
    del doc["title"]
    with pytest.raises(CardValidationError) as exc:
        parse_dashboard(doc)
    assert any(p.startswith("title") for p in exc.value.problems)


def test_load_yaml(tmp_path):
    path = tmp_path / "dash.yaml"
    path.write_text(
        "title: From YAML\n"
        "groups:\n"
        "  ops: {title: Operations}\n"
        "cards:\n"
        "  - {id: a, title: Uptime, score: 3, position: 0, group: ops}\n",
        encoding="utf-8",
    )
    spec, cards = load_dashboard_file(path)
    assert spec.title == "From YAML"
    assert cards[0].group == "ops"


def test_load_json(tmp_path):
    path = tmp_path / "dash.json"
    path.write_text(json.dumps(DOC), encoding="utf-8")
    spec, cards = load_dashboard_file(path)
    assert len(cards) == 2


def test_load_rejects_non_mapping(tmp_path):
    path = tmp_path / "dash.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(CardValidationError):
        load_dashboard_file(path)


def test_load_rejects_unparsable(tmp_path):
    path = tmp_path / "dash.yaml"
    path.write_text("title: [unclosed", encoding="utf-8")
    with pytest.raises(CardValidationError):
        load_dashboard_file(path)
