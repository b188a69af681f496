"""Shared fixtures for cardgrid tests."""

from __future__ import annotations

import itertools
from typing import List

import pytest

from cardgrid.core.models import Card, Placement, PlacementKind


@pytest.fixture
def make_card():
    """Factory for cards with sequential ids and default 6x4 size."""
    counter = itertools.count()

    def _make(score: float = 1.0, position: float = None, group: str = None, width: int = 6, height: int = 4, **kw):
        n = next(counter)
        return Card(
            id=kw.pop("id", f"c{n}"),
            title=kw.pop("title", f"Card {n}"),
            score=score,
            position=n if position is None else position,
            width=width,
            height=height,
            group=group,
            **kw,
        )

    return _make


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for var in (
        "CARDGRID_STORE_DIR",
        "CARDGRID_GRID_WIDTH",
        "CARDGRID_CARD_WIDTH",
        "CARDGRID_CARD_HEIGHT",
        "CARDGRID_MAX_CARDS",
        "CARDGRID_HEADER_HEIGHT",
        "CARDGRID_ROW_CEILING",
    ):
        monkeypatch.delenv(var, raising=False)


def card_placements(placements: List[Placement]) -> List[Placement]:
    return [p for p in placements if p.kind == PlacementKind.CARD]


def assert_no_overlaps(placements: List[Placement]) -> None:
    for i, a in enumerate(placements):
        for b in placements[i + 1 :]:
            assert not a.overlaps(b), f"{a} overlaps {b}"
