"""Card selection: pick the cards a dashboard shows and the order they go in.

Cards are ranked group by group so that a group either makes the cut together
or loses its weakest-positioned members at the tail. The layout order puts
each group at its anchor (the largest original position among its members)
and keeps members in their original order, so sorting the selection yields
one contiguous run per group.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from .config import LayoutConfig
from .errors import CardValidationError
from .models import Card, Group

# (group anchor, group rank, original position, input index)
OrderKey = Tuple[float, int, float, int]


@dataclass(frozen=True)
class RankedCard:
    card: Card
    group_key: Hashable
    order_key: OrderKey


@dataclass
class _CardGroup:
    key: Hashable
    members: List[Tuple[int, Card]]

    @property
    def score(self) -> float:
        return max(c.score for _, c in self.members)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def anchor(self) -> float:
        return max(c.position for _, c in self.members)


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_size(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_cards(
    cards: Sequence[Card],
    config: Optional[LayoutConfig] = None,
    groups: Optional[Dict[str, Group]] = None,
) -> None:
    """Raise CardValidationError if any card breaks the selection input contract."""
    config = config or LayoutConfig()
    problems: List[str] = []
    for i, card in enumerate(cards):
        label = f"card[{i}] ({card.id!r})"
        for name in ("score", "position"):
            value = getattr(card, name)
            if not _is_number(value) or not math.isfinite(value):
                problems.append(f"{label}: {name} must be a finite number, got {value!r}")
        for name in ("width", "height"):
            value = getattr(card, name)
            if not _is_size(value):
                problems.append(f"{label}: {name} must be an integer >= 1, got {value!r}")
        if _is_size(card.width) and card.width > config.grid_width:
            problems.append(f"{label}: width {card.width} exceeds grid width {config.grid_width}")
        if groups is not None and card.group is not None and card.group not in groups:
            problems.append(f"{label}: unknown group {card.group!r}")
    if groups:
        for key, group in groups.items():
            if not isinstance(group.title, str) or not group.title.strip():
                problems.append(f"group {key!r}: title must be a non-empty string")
    if problems:
        raise CardValidationError(f"{len(problems)} invalid card field(s)", problems)


def _partition(cards: Sequence[Card]) -> List[_CardGroup]:
    by_key: Dict[Hashable, _CardGroup] = {}
    for index, card in enumerate(cards):
        # Ungrouped cards are singleton groups keyed by their input index.
        key: Hashable = ("group", card.group) if card.group is not None else ("card", index)
        grp = by_key.get(key)
        if grp is None:
            grp = by_key[key] = _CardGroup(key=key, members=[])
        grp.members.append((index, card))
    return list(by_key.values())


def select_cards(cards: Sequence[Card], max_cards: int) -> List[RankedCard]:
    """Pick up to `max_cards` cards with the highest score.

    Groups compete with their best score; among equal scores the larger group
    wins. A group can still be cut: a group of 4 that starts at slot 7 of 9
    only gets 2 cards in.
    """
    if max_cards <= 0:
        return []

    groups = _partition(cards)
    groups.sort(key=lambda g: (g.score, g.size), reverse=True)

    out: List[RankedCard] = []
    for rank, grp in enumerate(groups):
        anchor = grp.anchor
        members = sorted(grp.members, key=lambda m: (m[1].position, m[0]))
        for index, card in members:
            out.append(RankedCard(card=card, group_key=grp.key, order_key=(anchor, rank, card.position, index)))
            if len(out) == max_cards:
                return out
    return out


def order_for_layout(ranked: Sequence[RankedCard]) -> List[Card]:
    return [r.card for r in sorted(ranked, key=lambda r: r.order_key)]


def shown_cards(cards: Sequence[Card], max_cards: int) -> List[Card]:
    """Selected cards in layout order."""
    return order_for_layout(select_cards(cards, max_cards))
