"""Place selected cards on the dashboard grid, one section per group run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Mapping, Optional, Sequence

from .config import LayoutConfig
from .grid import GridAllocator
from .models import Card, Extent, Group, Placement, PlacementKind

logger = logging.getLogger(__name__)

Emit = Callable[[Placement], object]


@dataclass
class CardRun:
    """Consecutive cards sharing a group, or consecutive ungrouped cards."""

    group_key: Optional[str]
    cards: List[Card]


@dataclass
class LayoutResult:
    placements: List[Placement] = field(default_factory=list)
    error: Optional[BaseException] = None
    failed_group: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def cards(self) -> List[Card]:
        return [p.card for p in self.placements if p.kind == PlacementKind.CARD and p.card is not None]

    @property
    def headers(self) -> List[Placement]:
        return [p for p in self.placements if p.kind == PlacementKind.HEADER]

    def raise_error(self) -> None:
        """Re-raise the captured error, if any."""
        if self.error is not None:
            raise self.error


def partition_runs(cards: Sequence[Card]) -> List[CardRun]:
    """Split cards into maximal runs of equal `group`.

    Consecutive ungrouped cards share one headerless run so they pack side
    by side instead of each opening a new section.
    """
    runs: List[CardRun] = []
    for card in cards:
        if runs and runs[-1].group_key == card.group:
            runs[-1].cards.append(card)
        else:
            runs.append(CardRun(group_key=card.group, cards=[card]))
    return runs


def header_text(group: Group) -> str:
    return f"# {group.title}"


class LayoutDriver:
    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def rows_needed(self, runs: Sequence[CardRun]) -> int:
        """Rows that hold `runs` even if every card ends up stacked alone.

        Each run adds at most a margin row, its header and the heights of its
        cards; two more empty rows keep `find_bottom_row` inside the grid.
        """
        cfg = self.config
        card_rows = sum(card.height for run in runs for card in run.cards)
        return card_rows + len(runs) * (cfg.header_height + 1) + 2

    def new_grid(self, runs: Sequence[CardRun] = ()) -> GridAllocator:
        """Fresh grid for `runs`.

        Without an explicit row ceiling the grid grows to `rows_needed`, so a
        valid selection never runs out of rows.
        """
        rows = self.config.row_count
        if self.config.row_ceiling is None:
            rows = max(rows, self.rows_needed(runs))
        return GridAllocator(self.config.grid_width, rows)

    def _place_run(self, grid: GridAllocator, run: CardRun, group: Optional[Group]) -> Iterator[Placement]:
        cfg = self.config
        start_row = grid.find_bottom_row()
        # The first section needs no empty row above it.
        if start_row > 0:
            start_row += 1
        if group is not None:
            start_row += cfg.header_height
            header = Extent(width=cfg.header_width, height=cfg.header_height)
            row = start_row - cfg.header_height
            grid.fill_rect(row, 0, header)
            yield Placement(
                kind=PlacementKind.HEADER,
                row=row,
                col=0,
                width=header.width,
                height=header.height,
                text=header_text(group),
                group=run.group_key,
            )

        for card in run.cards:
            row, col = grid.find_position(start_row, card)
            grid.fill_rect(row, col, card)
            yield Placement(
                kind=PlacementKind.CARD,
                row=row,
                col=col,
                width=card.width,
                height=card.height,
                card=card,
                group=run.group_key,
            )

    def iter_placements(
        self,
        cards: Sequence[Card],
        groups: Optional[Mapping[str, Group]] = None,
        grid: Optional[GridAllocator] = None,
    ) -> Iterator[Placement]:
        """Lazily yield placements for `cards`, already in layout order.

        Runs whose group key is missing from `groups` get no header.
        """
        groups = groups or {}
        runs = partition_runs(cards)
        grid = grid or self.new_grid(runs)
        for run in runs:
            group = groups.get(run.group_key) if run.group_key is not None else None
            yield from self._place_run(grid, run, group)

    def layout(
        self,
        cards: Sequence[Card],
        groups: Optional[Mapping[str, Group]] = None,
        emit: Optional[Emit] = None,
    ) -> LayoutResult:
        """Place and emit every card, stopping at the first failure.

        Placements emitted before a failure are kept on the result.
        """
        groups = groups or {}
        runs = partition_runs(cards)
        grid = self.new_grid(runs)
        result = LayoutResult()
        run: Optional[CardRun] = None
        try:
            for run in runs:
                group = groups.get(run.group_key) if run.group_key is not None else None
                for placement in self._place_run(grid, run, group):
                    if emit is not None:
                        emit(placement)
                    result.placements.append(placement)
        except Exception as e:
            result.error = e
            result.failed_group = run.group_key if run is not None else None
            logger.exception(
                "Layout stopped in group %r after %d placements",
                result.failed_group,
                len(result.placements),
            )
        return result
