"""Grid occupancy for one layout run.

Placement scans rows top to bottom and fills every rectangle whole, so in
the common case a rectangle whose top row is free is free everywhere below
it. `fits` is that top-row check. It is not sufficient on its own: with mixed
card sizes a short card can land in a gap at the right end of a row that a
wider, later-placed card already reaches into from the row below (a 6x2 card
in the last 6 columns of row 0, over a 10x2 card pushed down to row 1). So
`find_position` confirms the full rectangle once the top row passes, and
`fill_rect` asserts it never covers an occupied cell.
"""

from __future__ import annotations

from typing import List, Protocol, Tuple

from .errors import LayoutExhaustedError
from .models import Extent

Cell = Tuple[int, int]


class Sized(Protocol):
    width: int
    height: int


class GridAllocator:
    def __init__(self, width: int, row_count: int):
        self.width = width
        self.row_count = row_count
        self._rows: List[List[bool]] = [[False] * width for _ in range(row_count)]
        # Zero-height probe spanning the whole width.
        self._probe = Extent(width=width, height=0)

    def is_occupied(self, row: int, col: int) -> bool:
        return self._rows[row][col]

    def fits(self, row: int, col: int, item: Sized) -> bool:
        """Can `item` go at (row, col)? Checks bounds and the top row only."""
        if row + item.height > self.row_count:
            return False
        if col + item.width > self.width:
            return False
        return not any(self._rows[row][col : col + item.width])

    def is_free(self, row: int, col: int, item: Sized) -> bool:
        """Every cell `item` would cover at (row, col) is unoccupied."""
        return not any(
            any(self._rows[r][col : col + item.width]) for r in range(row, row + item.height)
        )

    def find_position(self, start_row: int, item: Sized) -> Cell:
        """First (row, col) in row-major order from `start_row` where `item` fits."""
        for row in range(start_row, self.row_count):
            for col in range(self.width):
                if self.fits(row, col, item) and self.is_free(row, col, item):
                    return row, col
        raise LayoutExhaustedError(start_row, item.width, item.height, self.row_count)

    def fill_rect(self, row: int, col: int, item: Sized) -> None:
        """Mark the rectangle covered by `item` at (row, col) as occupied."""
        assert self.is_free(row, col, item), (
            f"rectangle {item.width}x{item.height} at ({row}, {col}) overlaps placed content"
        )
        for r in range(row, row + item.height):
            cells = self._rows[r]
            for c in range(col, col + item.width):
                cells[c] = True

    def find_bottom_row(self) -> int:
        """First fully empty row that has another empty row right below it."""
        bottom = 0
        while True:
            bottom, _ = self.find_position(bottom, self._probe)
            next_bottom, _ = self.find_position(bottom + 1, self._probe)
            if next_bottom == bottom + 1:
                return bottom
            bottom = next_bottom
