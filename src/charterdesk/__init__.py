"""
charterdesk: authorization and round-trip flight projection for the
charter operations dashboard.
"""

from .config import DashboardConfig
from .guard import GuardDecision, GuardState, RouteGuard, ROUTE_GUARDS, guard_for_path, resolve_guard_state
from .navigation import ADMIN_NAV_ENTRY, DEFAULT_NAV_ENTRIES, NavEntry, visible_nav_entries
from .session import SessionProvider

__version__ = "0.1.0"

__all__ = [
    "DashboardConfig",
    "GuardDecision",
    "GuardState",
    "RouteGuard",
    "ROUTE_GUARDS",
    "guard_for_path",
    "resolve_guard_state",
    "ADMIN_NAV_ENTRY",
    "DEFAULT_NAV_ENTRIES",
    "NavEntry",
    "visible_nav_entries",
    "SessionProvider",
]
