"""Load dashboard documents (JSON or YAML) into cards and a DashboardSpec."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .config import LayoutConfig
from .errors import CardValidationError
from .models import Card, DashboardSpec, Group


class GroupInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str = Field(..., min_length=1, description="Section header title")


class CardInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    score: float = Field(..., allow_inf_nan=False)
    position: float = Field(..., allow_inf_nan=False)
    group: Optional[str] = None
    width: Optional[int] = Field(default=None, ge=1, description="Width in grid units")
    height: Optional[int] = Field(default=None, ge=1, description="Height in grid units")
    query: Any = None
    display: str = "table"
    visualization_settings: Dict[str, Any] = Field(default_factory=dict)


class DashboardInput(BaseModel):
    """A dashboard to populate: title, groups and candidate cards."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    groups: Dict[str, GroupInput] = Field(default_factory=dict)
    cards: List[CardInput] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_group_refs(self) -> "DashboardInput":
        unknown = sorted({c.group for c in self.cards if c.group is not None and c.group not in self.groups})
        if unknown:
            raise ValueError(f"cards reference undefined groups: {', '.join(unknown)}")
        return self


def _format_errors(err: ValidationError) -> List[str]:
    out: List[str] = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "<document>"
        out.append(f"{loc}: {e.get('msg')}")
    return out


def parse_dashboard(
    data: Dict[str, Any], config: Optional[LayoutConfig] = None
) -> Tuple[DashboardSpec, List[Card]]:
    """Validate a dashboard document and build the spec and card list."""
    config = config or LayoutConfig()
    try:
        doc = DashboardInput.model_validate(data)
    except ValidationError as e:
        raise CardValidationError("invalid dashboard document", _format_errors(e)) from e
    return to_models(doc, config)


def to_models(doc: DashboardInput, config: LayoutConfig) -> Tuple[DashboardSpec, List[Card]]:
    spec = DashboardSpec(
        title=doc.title,
        description=doc.description,
        groups={key: Group(id=key, title=g.title) for key, g in doc.groups.items()},
    )
    cards = [
        Card(
            id=c.id,
            title=c.title,
            description=c.description,
            score=c.score,
            position=c.position,
            group=c.group,
            width=c.width or config.default_card_width,
            height=c.height or config.default_card_height,
            query=c.query,
            display=c.display,
            visualization_settings=dict(c.visualization_settings),
        )
        for c in doc.cards
    ]
    return spec, cards


def load_dashboard_file(
    path: str | Path, config: Optional[LayoutConfig] = None
) -> Tuple[DashboardSpec, List[Card]]:
    """Load a `.json`, `.yaml` or `.yml` dashboard document."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            import yaml

            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except Exception as e:
        raise CardValidationError(f"cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise CardValidationError(f"{path}: top level must be a mapping")
    return parse_dashboard(data, config)
