from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class PlacementKind(str, Enum):
    """What a placement puts on the grid."""

    CARD = "card"
    HEADER = "header"


@dataclass(frozen=True)
class Extent:
    """A bare width x height, used for headers and grid probes."""

    width: int
    height: int


@dataclass(frozen=True)
class Group:
    id: str
    title: str


@dataclass(frozen=True)
class Card:
    """
    A candidate dashboard card.

    `query`, `display` and `visualization_settings` are carried through to the
    card sink untouched.
    """

    id: str
    title: str
    score: float
    position: float
    width: int
    height: int
    group: Optional[str] = None
    description: Optional[str] = None
    query: Any = None
    display: str = "table"
    visualization_settings: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class Placement:
    """
    A rectangle on the grid handed to the card sink.

    Card placements carry the card; header placements carry the header text.
    """

    kind: PlacementKind
    row: int
    col: int
    width: int
    height: int
    card: Optional[Card] = None
    text: Optional[str] = None
    group: Optional[str] = None

    @property
    def bottom(self) -> int:
        return self.row + self.height

    @property
    def right(self) -> int:
        return self.col + self.width

    def overlaps(self, other: "Placement") -> bool:
        return not (
            self.right <= other.col
            or other.right <= self.col
            or self.bottom <= other.row
            or other.bottom <= self.row
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "card_id": self.card.id if self.card else None,
            "title": self.card.title if self.card else None,
            "text": self.text,
            "group": self.group,
            "row": self.row,
            "col": self.col,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class DashboardSpec:
    """Title, description and group table of a dashboard to populate."""

    title: str
    description: Optional[str] = None
    groups: Dict[str, Group] = field(default_factory=dict)
