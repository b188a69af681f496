"""Tests for the dashboard population flow."""

import logging

import pytest

from cardgrid.core.config import LayoutConfig
from cardgrid.core.errors import CardValidationError
from cardgrid.core.models import DashboardSpec, Group, PlacementKind
from cardgrid.core.populate import create_dashboard


class RecordingSink:
    """In-memory dashboard and card sink."""

    def __init__(self, fail_on=None):
        self.dashboards = []
        self.emitted = []
        self.published = []
        self.fail_on = fail_on

    def create_dashboard(self, title, description):
        dashboard = {"id": len(self.dashboards) + 1, "name": title, "description": description}
        self.dashboards.append(dashboard)
        return dashboard

    def publish_dashboard(self, dashboard):
        self.published.append(dashboard["id"])

    def emit(self, dashboard, placement):
        if self.fail_on is not None and len(self.emitted) == self.fail_on:
            raise RuntimeError("database unavailable")
        self.emitted.append((dashboard["id"], placement))
        return len(self.emitted)


def test_populates_and_publishes(make_card, caplog):
    sink = RecordingSink()
    spec = DashboardSpec(title="Overview", description="auto", groups={"g": Group("g", "Sales")})
    cards = [make_card(score=5, title="Revenue"), make_card(score=3, group="g", title="Orders")]

    with caplog.at_level(logging.INFO, logger="cardgrid.core.populate"):
        result = create_dashboard(spec, cards, dashboard_sink=sink, card_sink=sink)

    assert result.ok
    assert result.dashboard == sink.dashboards[0]
    assert sink.published == [1]
    assert [p.kind for _, p in sink.emitted] == [PlacementKind.CARD, PlacementKind.HEADER, PlacementKind.CARD]
    assert result.placed == 2
    assert "Adding 2 cards to dashboard 1: Revenue; Orders" in caplog.text


def test_respects_max_cards(make_card):
    sink = RecordingSink()
    cards = [make_card(score=i) for i in range(15)]
    result = create_dashboard(
        DashboardSpec(title="Many"), cards, dashboard_sink=sink, card_sink=sink, config=LayoutConfig(max_cards=4)
    )
    assert len(result.shown) == 4
    assert {p.card.score for _, p in sink.emitted} == {14, 13, 12, 11}


def test_invalid_cards_fail_before_dashboard_exists(make_card):
    sink = RecordingSink()
    with pytest.raises(CardValidationError):
        create_dashboard(
            DashboardSpec(title="Broken"),
            [make_card(score=float("nan"))],
            dashboard_sink=sink,
            card_sink=sink,
        )
    assert sink.dashboards == []


def test_sink_failure_still_returns_dashboard(make_card, caplog):
    sink = RecordingSink(fail_on=2)
    cards = [make_card(score=9 - i) for i in range(5)]

    with caplog.at_level(logging.ERROR):
        result = create_dashboard(DashboardSpec(title="Flaky"), cards, dashboard_sink=sink, card_sink=sink)

    assert not result.ok
    assert result.dashboard["id"] == 1
    assert result.placed == 2
    assert len(sink.emitted) == 2
    assert sink.published == [1]
    assert "populated partially" in caplog.text
    assert "database unavailable" in caplog.text
