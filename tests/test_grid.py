"""Tests for grid occupancy and position search."""

import pytest

from cardgrid.core.errors import LayoutExhaustedError
from cardgrid.core.grid import GridAllocator
from cardgrid.core.models import Extent


def test_bottom_row_of_empty_grid_is_zero():
    grid = GridAllocator(18, 20)
    assert grid.find_bottom_row() == 0
    assert grid.find_bottom_row() == 0


def test_filled_rect_no_longer_fits():
    grid = GridAllocator(18, 20)
    card = Extent(6, 4)
    assert grid.fits(2, 3, card)
    grid.fill_rect(2, 3, card)
    assert not grid.fits(2, 3, card)
    assert grid.is_occupied(5, 8)
    assert not grid.is_occupied(6, 8)


def test_fits_respects_bounds():
    grid = GridAllocator(18, 10)
    card = Extent(6, 4)
    assert grid.fits(0, 12, card)
    assert not grid.fits(0, 13, card)
    assert grid.fits(6, 0, card)
    assert not grid.fits(7, 0, card)


def test_fits_checks_only_top_row():
    grid = GridAllocator(18, 10)
    grid.fill_rect(1, 0, Extent(18, 1))
    # Row 0 is free so the check passes even though row 1 is taken.
    assert grid.fits(0, 0, Extent(6, 4))


def test_find_position_scans_left_to_right_then_down():
    grid = GridAllocator(18, 20)
    card = Extent(6, 4)
    placed = []
    for _ in range(4):
        row, col = grid.find_position(0, card)
        grid.fill_rect(row, col, card)
        placed.append((row, col))
    assert placed == [(0, 0), (0, 6), (0, 12), (4, 0)]


def test_find_position_honours_start_row():
    grid = GridAllocator(18, 20)
    assert grid.find_position(7, Extent(6, 4)) == (7, 0)


def test_find_position_raises_when_exhausted():
    grid = GridAllocator(6, 4)
    grid.fill_rect(0, 0, Extent(6, 4))
    with pytest.raises(LayoutExhaustedError) as exc:
        grid.find_position(0, Extent(6, 1))
    assert exc.value.row_count == 4


def test_bottom_row_after_single_section():
    grid = GridAllocator(18, 30)
    grid.fill_rect(0, 0, Extent(6, 4))
    grid.fill_rect(0, 6, Extent(6, 2))
    assert grid.find_bottom_row() == 4


def test_bottom_row_skips_single_empty_margin_row():
    grid = GridAllocator(18, 30)
    grid.fill_rect(0, 0, Extent(6, 4))
    # Row 4 is an empty margin, the next section starts at row 5.
    grid.fill_rect(5, 0, Extent(6, 2))
    grid.fill_rect(7, 0, Extent(6, 4))
    assert grid.find_bottom_row() == 11


def test_fill_rect_rejects_overlap():
    grid = GridAllocator(18, 10)
    grid.fill_rect(0, 0, Extent(6, 4))
    with pytest.raises(AssertionError):
        grid.fill_rect(2, 3, Extent(6, 4))


def test_find_position_skips_gap_blocked_from_below():
    grid = GridAllocator(18, 20)
    grid.fill_rect(0, 0, Extent(6, 2))
    grid.fill_rect(0, 6, Extent(6, 1))
    wide = Extent(10, 2)
    assert grid.find_position(0, wide) == (1, 6)
    grid.fill_rect(1, 6, wide)

    short = Extent(6, 2)
    # Top row of (0, 12) is free, but the wide card reaches into row 1 there.
    assert grid.fits(0, 12, short)
    assert not grid.is_free(0, 12, short)
    assert grid.find_position(0, short) == (2, 0)
