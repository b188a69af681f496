"""Exception types raised by cardgrid."""

from __future__ import annotations

from typing import List, Optional


class CardgridError(Exception):
    """Base class for all cardgrid errors."""


class ConfigError(CardgridError, ValueError):
    """Invalid layout tunables."""


class CardValidationError(CardgridError, ValueError):
    """Malformed cards, groups or dashboard documents.

    Raised before any dashboard is created.
    """

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.problems: List[str] = list(problems or [])

    def __str__(self) -> str:
        base = super().__str__()
        if not self.problems:
            return base
        return base + "\n" + "\n".join(f"  - {p}" for p in self.problems)


class LayoutExhaustedError(CardgridError, RuntimeError):
    """No free slot within the grid's row ceiling.

    This means the row ceiling was sized too small for the input, which the
    selection cap is supposed to rule out.
    """

    def __init__(self, start_row: int, width: int, height: int, row_count: int):
        super().__init__(
            f"no room for a {width}x{height} rectangle from row {start_row} "
            f"(row ceiling {row_count})"
        )
        self.start_row = start_row
        self.width = width
        self.height = height
        self.row_count = row_count
