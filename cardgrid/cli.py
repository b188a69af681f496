#!/usr/bin/env python3
"""
cardgrid CLI - lay out scored cards on a dashboard grid

Usage:
    cardgrid layout <file>                 Select cards and print their placements
    cardgrid populate <file>               Create the dashboard in the JSON store
    cardgrid show <dashboard_id>           Print a stored dashboard
"""

import argparse
import json
import logging
import string
import sys
from pathlib import Path
from typing import List, Sequence

from .core.config import LayoutConfig
from .core.errors import CardgridError
from .core.layout import LayoutDriver
from .core.loader import load_dashboard_file
from .core.models import Placement, PlacementKind
from .core.populate import create_dashboard
from .core.selection import shown_cards, validate_cards
from .core.store import JsonDashboardStore

_LABELS = string.ascii_uppercase + string.ascii_lowercase + string.digits


def main(argv: Sequence[str] = None):
    parser = argparse.ArgumentParser(
        description="cardgrid: lay out scored cards on a dashboard grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    cardgrid layout dashboard.yaml
    cardgrid layout dashboard.json --max-cards 6 --json
    cardgrid populate dashboard.yaml --store ./.cardgrid
    cardgrid show 1
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_layout_args(p):
        p.add_argument("file", help="Dashboard document (.json, .yaml, .yml)")
        p.add_argument("--max-cards", "-m", type=int, help="Maximum cards on the dashboard")
        p.add_argument("--grid-width", "-w", type=int, help="Grid width in columns")
        p.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    # layout command
    layout_parser = subparsers.add_parser("layout", help="Select cards and print their placements")
    add_layout_args(layout_parser)
    layout_parser.add_argument("--no-preview", action="store_true", help="Skip the text grid preview")

    # populate command
    populate_parser = subparsers.add_parser("populate", help="Create the dashboard in the JSON store")
    add_layout_args(populate_parser)
    populate_parser.add_argument("--store", "-s", help="Store directory (default: ./.cardgrid)")
    populate_parser.add_argument("--creator-id", type=int, help="Acting user id recorded on new records")
    populate_parser.add_argument("--superuser", action="store_true", help="Allow creating the auto-generated collection")

    # show command
    show_parser = subparsers.add_parser("show", help="Print a stored dashboard")
    show_parser.add_argument("dashboard_id", type=int, help="Dashboard id")
    show_parser.add_argument("--store", "-s", help="Store directory (default: ./.cardgrid)")
    show_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    try:
        if args.command == "layout":
            return cmd_layout(args)
        elif args.command == "populate":
            return cmd_populate(args)
        elif args.command == "show":
            return cmd_show(args)
    except CardgridError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def _config(args) -> LayoutConfig:
    return LayoutConfig.from_env().with_overrides(max_cards=args.max_cards, grid_width=args.grid_width)


def render_preview(placements: List[Placement], grid_width: int) -> str:
    """Draw placements as a character grid: '=' for headers, a letter per card."""
    rows = max((p.bottom for p in placements), default=0)
    canvas = [["."] * grid_width for _ in range(rows)]
    card_index = 0
    for p in placements:
        if p.kind == PlacementKind.HEADER:
            ch = "="
        else:
            ch = _LABELS[card_index % len(_LABELS)]
            card_index += 1
        for r in range(p.row, p.bottom):
            for c in range(p.col, p.right):
                canvas[r][c] = ch
    return "\n".join("".join(line) for line in canvas)


def _print_placements(placements: List[Placement]) -> None:
    for p in placements:
        if p.kind == PlacementKind.HEADER:
            print(f"- header `{p.text}` at row {p.row}, col {p.col} ({p.width}x{p.height})")
        else:
            print(f"- `{p.card.id}` {p.card.title} at row {p.row}, col {p.col} ({p.width}x{p.height})")


def cmd_layout(args):
    """Handle layout command."""
    config = _config(args)
    spec, cards = load_dashboard_file(args.file, config)
    validate_cards(cards, config, spec.groups)

    shown = shown_cards(cards, config.max_cards)
    result = LayoutDriver(config).layout(shown, spec.groups)

    if args.json:
        print(json.dumps({
            "title": spec.title,
            "candidates": len(cards),
            "shown": len(shown),
            "placements": [p.to_dict() for p in result.placements],
            "error": str(result.error) if result.error else None,
        }, indent=2))
    else:
        print(f"# {spec.title}")
        print("")
        print(f"Showing {len(shown)} of {len(cards)} cards")
        print("")
        _print_placements(result.placements)
        if not args.no_preview and result.placements:
            print("")
            print(render_preview(result.placements, config.grid_width))
        if result.error:
            print(f"\nLayout stopped in group {result.failed_group!r}: {result.error}", file=sys.stderr)

    return 0 if result.ok else 2


def cmd_populate(args):
    """Handle populate command."""
    config = _config(args)
    spec, cards = load_dashboard_file(args.file, config)
    store = JsonDashboardStore(
        Path(args.store) if args.store else None,
        creator_id=args.creator_id,
        is_superuser=args.superuser,
    )

    result = create_dashboard(spec, cards, dashboard_sink=store, card_sink=store, config=config)
    dashboard = result.dashboard

    if args.json:
        print(json.dumps({
            "dashboard": dashboard,
            "placements": [p.to_dict() for p in result.layout.placements],
            "error": str(result.layout.error) if result.layout.error else None,
        }, indent=2))
    else:
        print(f"Created dashboard {dashboard['id']}: {dashboard['name']}")
        print(f"Placed {result.placed} of {len(result.shown)} selected cards")
        print("")
        _print_placements(result.layout.placements)

    return 0 if result.ok else 2


def cmd_show(args):
    """Handle show command."""
    store = JsonDashboardStore(Path(args.store) if args.store else None)
    dashboard = store.get_dashboard(args.dashboard_id)

    if not dashboard:
        print(f"Dashboard not found: {args.dashboard_id}", file=sys.stderr)
        return 1

    dashcards = store.dashcards_for(args.dashboard_id)

    if args.json:
        print(json.dumps({"dashboard": dashboard, "dashcards": dashcards}, indent=2))
        return 0

    print(f"# {dashboard['name']}")
    if dashboard.get("description"):
        print("")
        print(dashboard["description"])
    print("")
    for dc in dashcards:
        if dc.get("card_id") is None:
            label = dc.get("visualization_settings", {}).get("text") or "(text)"
        else:
            card = store.get_card(dc["card_id"]) or {}
            label = card.get("name") or f"card {dc['card_id']}"
        print(f"- {label} at row {dc['row']}, col {dc['col']} ({dc['size_x']}x{dc['size_y']})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
