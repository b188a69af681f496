"""Core types and algorithms: selection, grid allocation, layout."""

from .config import LayoutConfig
from .errors import CardgridError, CardValidationError, ConfigError, LayoutExhaustedError
from .grid import GridAllocator
from .layout import CardRun, LayoutDriver, LayoutResult, partition_runs
from .models import Card, DashboardSpec, Extent, Group, Placement, PlacementKind
from .populate import CardSink, DashboardSink, PopulateResult, create_dashboard
from .selection import RankedCard, order_for_layout, select_cards, shown_cards, validate_cards

__all__ = [
    # models
    "Card",
    "DashboardSpec",
    "Extent",
    "Group",
    "Placement",
    "PlacementKind",
    # config / errors
    "LayoutConfig",
    "CardgridError",
    "CardValidationError",
    "ConfigError",
    "LayoutExhaustedError",
    # algorithms
    "GridAllocator",
    "RankedCard",
    "select_cards",
    "order_for_layout",
    "shown_cards",
    "validate_cards",
    "CardRun",
    "LayoutDriver",
    "LayoutResult",
    "partition_runs",
    # population
    "CardSink",
    "DashboardSink",
    "PopulateResult",
    "create_dashboard",
]
