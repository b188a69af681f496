"""
cardgrid: lay out scored dashboard cards on a fixed-width grid.

Main interface: create_dashboard()
"""

__version__ = "0.1.0"

from .core import Card, DashboardSpec, Group, LayoutConfig, LayoutDriver, create_dashboard, shown_cards

__all__ = ["Card", "DashboardSpec", "Group", "LayoutConfig", "LayoutDriver", "create_dashboard", "shown_cards"]
