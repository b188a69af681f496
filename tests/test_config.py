"""Tests for layout configuration."""

import pytest

from cardgrid.core.config import LayoutConfig
from cardgrid.core.errors import ConfigError


def test_defaults():
    cfg = LayoutConfig()
    assert (cfg.grid_width, cfg.default_card_width, cfg.default_card_height) == (18, 6, 4)
    assert (cfg.max_cards, cfg.header_height) == (9, 2)
    assert cfg.row_count == 9 * 18
    assert cfg.header_width == 6


def test_row_ceiling_overrides_row_count():
    assert LayoutConfig(row_ceiling=40).row_count == 40


def test_from_env():
    cfg = LayoutConfig.from_env({"CARDGRID_GRID_WIDTH": "24", "CARDGRID_MAX_CARDS": " 12 "})
    assert cfg.grid_width == 24
    assert cfg.max_cards == 12
    assert cfg.default_card_width == 6


def test_from_env_rejects_garbage():
    with pytest.raises(ConfigError):
        LayoutConfig.from_env({"CARDGRID_MAX_CARDS": "many"})


@pytest.mark.parametrize(
    "kwargs",
    [{"grid_width": 0}, {"max_cards": -1}, {"header_height": True}, {"grid_width": 4}, {"row_ceiling": 0}],
)
def test_invalid_values(kwargs):
    with pytest.raises(ConfigError):
        LayoutConfig(**kwargs)


def test_with_overrides_ignores_none():
    cfg = LayoutConfig()
    assert cfg.with_overrides(max_cards=None) is cfg
    assert cfg.with_overrides(max_cards=3).max_cards == 3
