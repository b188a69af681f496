"""File-backed dashboard store.

Implements both population sinks on top of one versioned JSON document:
dashboards, saved cards, dashboard cards (placements), the collection that
holds auto-generated cards, and a log of published events.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import CardgridError
from .models import Placement, PlacementKind
from .paths import get_store_dir, read_json, write_json_atomic

logger = logging.getLogger(__name__)

STORE_VERSION = 1

AUTO_COLLECTION_NAME = "Automatically Generated Questions"
AUTO_COLLECTION_COLOR = "#000000"
AUTO_COLLECTION_DESCRIPTION = "Cards used in automatically generated dashboards."
LOCK_TIMEOUT_S = 2.0


def _next_id(records: List[Dict[str, Any]]) -> int:
    return max((int(r.get("id") or 0) for r in records), default=0) + 1


@dataclass
class StoreState:
    store_version: int = STORE_VERSION
    dashboards: List[Dict[str, Any]] = field(default_factory=list)
    cards: List[Dict[str, Any]] = field(default_factory=list)
    dashcards: List[Dict[str, Any]] = field(default_factory=list)
    collections: List[Dict[str, Any]] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "store_version": self.store_version,
            "dashboards": list(self.dashboards),
            "cards": list(self.cards),
            "dashcards": list(self.dashcards),
            "collections": list(self.collections),
            "events": list(self.events),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StoreState":
        if int(d.get("store_version") or 0) != STORE_VERSION:
            return cls()
        return cls(
            dashboards=list(d.get("dashboards") or []),
            cards=list(d.get("cards") or []),
            dashcards=list(d.get("dashcards") or []),
            collections=list(d.get("collections") or []),
            events=list(d.get("events") or []),
        )


class JsonDashboardStore:
    """Dashboard and card sink persisting to `<store_dir>/store.json`.

    `creator_id` is the acting user recorded on every record. Only a
    superuser may create the auto-generated card collection; for anyone
    else cards land outside any collection until it exists.
    """

    def __init__(
        self,
        store_dir: Optional[Path] = None,
        *,
        creator_id: Optional[int] = None,
        is_superuser: bool = False,
    ):
        self.store_dir = Path(store_dir) if store_dir else get_store_dir()
        self.creator_id = creator_id
        self.is_superuser = is_superuser
        self._lock = threading.RLock()
        self.state = self.load()

    @property
    def path(self) -> Path:
        return self.store_dir / "store.json"

    def load(self) -> StoreState:
        with self._lock:
            return StoreState.from_dict(read_json(self.path))

    @contextmanager
    def _file_lock(self):
        """Hold `<store_dir>/lock` across processes while writing.

        Gives up after LOCK_TIMEOUT_S and writes anyway. Without fcntl only the
        in-process lock applies.
        """
        self.store_dir.mkdir(parents=True, exist_ok=True)
        try:
            import fcntl
        except ImportError:
            yield
            return

        with (self.store_dir / "lock").open("a+", encoding="utf-8") as f:
            held = False
            deadline = time.monotonic() + LOCK_TIMEOUT_S
            while not held and time.monotonic() < deadline:
                try:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    held = True
                except BlockingIOError:
                    time.sleep(0.02)
            if not held:
                logger.warning("Store lock %s busy; writing without it", self.store_dir / "lock")
            try:
                yield
            finally:
                if held:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def save(self) -> None:
        with self._lock, self._file_lock():
            write_json_atomic(self.path, self.state.to_dict())

    # --- events ---

    def publish_event(self, topic: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        event = {"topic": topic, "object_id": payload.get("id"), "created_at": time.time()}
        with self._lock:
            self.state.events.append(event)
        logger.debug("Published %s for %s", topic, event["object_id"])
        return event

    # --- collections ---

    def _auto_collection(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            for coll in self.state.collections:
                if coll.get("name") == AUTO_COLLECTION_NAME:
                    return coll
            if not self.is_superuser:
                return None
            coll = {
                "id": _next_id(self.state.collections),
                "name": AUTO_COLLECTION_NAME,
                "color": AUTO_COLLECTION_COLOR,
                "description": AUTO_COLLECTION_DESCRIPTION,
            }
            self.state.collections.append(coll)
            return coll

    # --- dashboard sink ---

    def create_dashboard(self, title: str, description: Optional[str]) -> Dict[str, Any]:
        with self._lock:
            dashboard = {
                "id": _next_id(self.state.dashboards),
                "name": title,
                "description": description,
                "creator_id": self.creator_id,
                "parameters": [],
                "created_at": time.time(),
            }
            self.state.dashboards.append(dashboard)
            self.save()
        return dashboard

    def publish_dashboard(self, dashboard: Dict[str, Any]) -> None:
        self.publish_event("dashboard-create", dashboard)
        self.save()

    # --- card sink ---

    def _create_card(self, placement: Placement) -> Dict[str, Any]:
        card = placement.card
        if card is None:
            raise CardgridError(f"card placement at ({placement.row}, {placement.col}) carries no card")
        collection = self._auto_collection()
        record = {
            "id": _next_id(self.state.cards),
            "name": card.title,
            "description": card.description,
            "creator_id": self.creator_id,
            "dataset_query": card.query,
            "display": card.display,
            "visualization_settings": dict(card.visualization_settings),
            "collection_id": collection["id"] if collection else None,
        }
        self.state.cards.append(record)
        self.publish_event("card-create", record)
        return record

    def _add_dashcard(self, dashboard: Dict[str, Any], placement: Placement, **extra: Any) -> Dict[str, Any]:
        dashcard = {
            "id": _next_id(self.state.dashcards),
            "dashboard_id": dashboard["id"],
            "row": placement.row,
            "col": placement.col,
            "size_x": placement.width,
            "size_y": placement.height,
        }
        dashcard.update(extra)
        self.state.dashcards.append(dashcard)
        return dashcard

    def emit(self, dashboard: Dict[str, Any], placement: Placement) -> Dict[str, Any]:
        with self._lock:
            if placement.kind == PlacementKind.HEADER:
                dashcard = self._add_dashcard(
                    dashboard,
                    placement,
                    card_id=None,
                    creator_id=self.creator_id,
                    visualization_settings={
                        "text": placement.text,
                        "virtual_card": {
                            "name": None,
                            "display": "text",
                            "dataset_query": None,
                            "visualization_settings": {},
                        },
                    },
                )
            else:
                card = self._create_card(placement)
                dashcard = self._add_dashcard(dashboard, placement, card_id=card["id"])
            self.save()
        return dashcard

    # --- queries ---

    def get_dashboard(self, dashboard_id: int) -> Optional[Dict[str, Any]]:
        for d in self.state.dashboards:
            if d.get("id") == dashboard_id:
                return d
        return None

    def get_card(self, card_id: int) -> Optional[Dict[str, Any]]:
        for c in self.state.cards:
            if c.get("id") == card_id:
                return c
        return None

    def dashcards_for(self, dashboard_id: int) -> List[Dict[str, Any]]:
        out = [dc for dc in self.state.dashcards if dc.get("dashboard_id") == dashboard_id]
        out.sort(key=lambda dc: (dc["row"], dc["col"]))
        return out
