"""Create a dashboard and populate it with the best candidate cards.

Persistence is delegated to two sinks: a dashboard sink that creates and
announces the dashboard, and a card sink that turns each placement into a
stored dashboard card.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

from .config import LayoutConfig
from .layout import LayoutDriver, LayoutResult
from .models import Card, DashboardSpec, Placement
from .selection import shown_cards, validate_cards

logger = logging.getLogger(__name__)


class DashboardSink(Protocol):
    def create_dashboard(self, title: str, description: Optional[str]) -> Any: ...

    def publish_dashboard(self, dashboard: Any) -> None: ...


class CardSink(Protocol):
    def emit(self, dashboard: Any, placement: Placement) -> Any: ...


@dataclass
class PopulateResult:
    dashboard: Any
    shown: List[Card]
    layout: LayoutResult

    @property
    def ok(self) -> bool:
        return self.layout.ok

    @property
    def placed(self) -> int:
        return len(self.layout.cards)


def dashboard_id(dashboard: Any) -> Any:
    if isinstance(dashboard, dict):
        return dashboard.get("id")
    return getattr(dashboard, "id", dashboard)


def create_dashboard(
    spec: DashboardSpec,
    cards: Sequence[Card],
    *,
    dashboard_sink: DashboardSink,
    card_sink: CardSink,
    config: Optional[LayoutConfig] = None,
) -> PopulateResult:
    """Create a dashboard and lay out up to `config.max_cards` of `cards` on it.

    Invalid cards raise CardValidationError before anything is created. After
    that the dashboard is always returned; a layout failure part way through
    leaves the cards placed so far and is reported on `result.layout`.
    """
    config = config or LayoutConfig()
    validate_cards(cards, config, spec.groups)

    dashboard = dashboard_sink.create_dashboard(spec.title, spec.description)
    shown = shown_cards(cards, config.max_cards)

    driver = LayoutDriver(config)
    result = driver.layout(shown, spec.groups, emit=lambda p: card_sink.emit(dashboard, p))
    if not result.ok:
        logger.error(
            "Dashboard %s populated partially: %d of %d cards placed (group %r: %s)",
            dashboard_id(dashboard),
            len(result.cards),
            len(shown),
            result.failed_group,
            result.error,
        )

    dashboard_sink.publish_dashboard(dashboard)
    logger.info(
        "Adding %d cards to dashboard %s: %s",
        len(shown),
        dashboard_id(dashboard),
        "; ".join(c.title for c in shown),
    )
    return PopulateResult(dashboard=dashboard, shown=shown, layout=result)
