#!/usr/bin/env python3
"""
cardgrid MCP Server - dashboard card layout for LLM agents

Tools:
1. cardgrid_layout: preview which cards make the cut and where they go
2. cardgrid_populate: create the dashboard in the JSON store
3. cardgrid_show: read a stored dashboard back
"""

import json
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mcp.server.fastmcp import FastMCP

from .core.config import LayoutConfig
from .core.errors import CardgridError
from .core.layout import LayoutDriver, LayoutResult
from .core.loader import DashboardInput, to_models
from .core.populate import create_dashboard
from .core.selection import shown_cards, validate_cards
from .core.store import JsonDashboardStore

# Initialize MCP server
mcp = FastMCP("cardgrid_mcp")


class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


# ============================================================================
# Input Models
# ============================================================================

class LayoutInput(BaseModel):
    """Input for laying out a dashboard document."""
    model_config = ConfigDict(extra='forbid')

    dashboard: DashboardInput = Field(..., description="Dashboard title, groups and candidate cards")
    max_cards: Optional[int] = Field(default=None, description="Maximum cards to show", ge=1, le=100)
    grid_width: Optional[int] = Field(default=None, description="Grid width in columns", ge=1, le=100)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for a readable list, 'json' for structured data"
    )


class PopulateInput(LayoutInput):
    """Input for creating a dashboard in the store."""

    store_dir: Optional[str] = Field(default=None, description="Store directory (default: ./.cardgrid)")


class ShowInput(BaseModel):
    """Input for reading a stored dashboard."""
    model_config = ConfigDict(extra='forbid')

    dashboard_id: int = Field(..., description="Dashboard id", ge=1)
    store_dir: Optional[str] = Field(default=None, description="Store directory (default: ./.cardgrid)")


# ============================================================================
# Helper Functions
# ============================================================================

def _config(params: LayoutInput) -> LayoutConfig:
    return LayoutConfig.from_env().with_overrides(max_cards=params.max_cards, grid_width=params.grid_width)


def _format_layout(title: str, result: LayoutResult, fmt: ResponseFormat) -> str:
    if fmt == ResponseFormat.JSON:
        return json.dumps({
            "title": title,
            "placements": [p.to_dict() for p in result.placements],
            "error": str(result.error) if result.error else None,
        }, indent=2)

    lines: List[str] = [f"# {title}", ""]
    for p in result.placements:
        d = p.to_dict()
        label = d["text"] if d["kind"] == "header" else f"`{d['card_id']}` {d['title']}"
        lines.append(f"- {label}: row {p.row}, col {p.col}, {p.width}x{p.height}")
    if result.error:
        lines.append("")
        lines.append(f"**Layout stopped** in group `{result.failed_group}`: {result.error}")
    return "\n".join(lines)


# ============================================================================
# MCP Tools
# ============================================================================

@mcp.tool(
    name="cardgrid_layout",
    annotations={
        "title": "Preview Dashboard Layout",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def cardgrid_layout(params: LayoutInput) -> str:
    """
    Select the best cards and compute their grid placements without saving.

    Args:
        params: Dashboard document plus optional max_cards / grid_width

    Returns:
        Placements (headers and cards) in emission order, or error message
    """
    try:
        config = _config(params)
        spec, cards = to_models(params.dashboard, config)
        validate_cards(cards, config, spec.groups)
    except CardgridError as e:
        return f"Error: {e}"

    result = LayoutDriver(config).layout(shown_cards(cards, config.max_cards), spec.groups)
    return _format_layout(spec.title, result, params.response_format)


@mcp.tool(
    name="cardgrid_populate",
    annotations={
        "title": "Create Dashboard",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False
    }
)
async def cardgrid_populate(params: PopulateInput) -> str:
    """
    Create a dashboard in the JSON store and populate it with the best cards.

    Args:
        params: Dashboard document, layout overrides and store directory

    Returns:
        Dashboard id and placements, or error message
    """
    try:
        config = _config(params)
        spec, cards = to_models(params.dashboard, config)
        store = JsonDashboardStore(Path(params.store_dir) if params.store_dir else None)
        result = create_dashboard(spec, cards, dashboard_sink=store, card_sink=store, config=config)
    except CardgridError as e:
        return f"Error: {e}"

    body = _format_layout(spec.title, result.layout, params.response_format)
    if params.response_format == ResponseFormat.JSON:
        payload = json.loads(body)
        payload["dashboard_id"] = result.dashboard["id"]
        return json.dumps(payload, indent=2)
    return f"Created dashboard {result.dashboard['id']}\n\n{body}"


@mcp.tool(
    name="cardgrid_show",
    annotations={
        "title": "Show Stored Dashboard",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def cardgrid_show(params: ShowInput) -> str:
    """
    Read a stored dashboard and its cards.

    Args:
        params: Dashboard id and optional store directory

    Returns:
        JSON with the dashboard and its dashboard cards, or error message
    """
    store = JsonDashboardStore(Path(params.store_dir) if params.store_dir else None)
    dashboard = store.get_dashboard(params.dashboard_id)
    if not dashboard:
        return f"Error: Dashboard {params.dashboard_id} not found."
    return json.dumps({"dashboard": dashboard, "dashcards": store.dashcards_for(params.dashboard_id)}, indent=2)


# Entry point for running the server
def main():
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
