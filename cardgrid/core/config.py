"""Layout tunables.

Defaults match the dashboard grid the cards are designed for: 18 columns,
6x4 cards, at most 9 cards per dashboard and 2-row section headers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError

GRID_WIDTH = 18
DEFAULT_CARD_WIDTH = 6
DEFAULT_CARD_HEIGHT = 4
MAX_CARDS = 9
HEADER_HEIGHT = 2

# Environment variable -> LayoutConfig field
ENV_VARS: Dict[str, str] = {
    "CARDGRID_GRID_WIDTH": "grid_width",
    "CARDGRID_CARD_WIDTH": "default_card_width",
    "CARDGRID_CARD_HEIGHT": "default_card_height",
    "CARDGRID_MAX_CARDS": "max_cards",
    "CARDGRID_HEADER_HEIGHT": "header_height",
    "CARDGRID_ROW_CEILING": "row_ceiling",
}


@dataclass(frozen=True)
class LayoutConfig:
    grid_width: int = GRID_WIDTH
    default_card_width: int = DEFAULT_CARD_WIDTH
    default_card_height: int = DEFAULT_CARD_HEIGHT
    max_cards: int = MAX_CARDS
    header_height: int = HEADER_HEIGHT
    # Hard cap on grid rows. None starts at max_cards * grid_width and grows
    # the grid to whatever the selected cards need.
    row_ceiling: Optional[int] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.name == "row_ceiling":
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            if value < 1:
                raise ConfigError(f"{f.name} must be >= 1, got {value}")
        if self.default_card_width > self.grid_width:
            raise ConfigError(
                f"default_card_width ({self.default_card_width}) exceeds grid_width ({self.grid_width})"
            )

    @property
    def row_count(self) -> int:
        """Number of rows a fresh grid gets."""
        if self.row_ceiling is not None:
            return self.row_ceiling
        return self.max_cards * self.grid_width

    @property
    def header_width(self) -> int:
        return self.default_card_width

    def with_overrides(self, **overrides: Any) -> "LayoutConfig":
        """Copy with the given fields replaced; None values are ignored."""
        kept = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **kept) if kept else self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LayoutConfig":
        env = os.environ if environ is None else environ
        values: Dict[str, int] = {}
        for var, name in ENV_VARS.items():
            raw = (env.get(var) or "").strip()
            if not raw:
                continue
            try:
                values[name] = int(raw)
            except ValueError:
                raise ConfigError(f"{var} must be an integer, got {raw!r}") from None
        return cls(**values)
