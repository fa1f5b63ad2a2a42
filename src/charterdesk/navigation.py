"""
Sidebar navigation entries and their visibility rules.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .auth.models import User
from .auth.modules import ModuleKey
from .auth.permissions import Role, is_module_allowed


@dataclass(frozen=True)
class NavEntry:
    """
    A sidebar link.

    Attributes:
        path: Route path
        label: Link text
        icon: Icon shown next to the label
        required_module: Module the entry is gated on, or None
    """
    path: str
    label: str
    icon: str = ""
    required_module: Optional[ModuleKey] = None


DEFAULT_NAV_ENTRIES = (
    NavEntry("/", "Dashboard", "📊"),
    NavEntry("/hrms", "HRMS", "👥", ModuleKey.HRMS),
    NavEntry("/operations", "Operations", "⚙️", ModuleKey.FLIGHT_MANAGEMENT),
    NavEntry("/flights", "Flight Management", "✈️", ModuleKey.FLIGHT_MANAGEMENT),
    NavEntry("/marketing", "Marketing", "📢", ModuleKey.CAMPAIGNS),
    NavEntry("/crm", "CRM", "💼", ModuleKey.CLIENTS),
    NavEntry("/tasks", "Tasks", "✅"),
    NavEntry("/announcements", "Announcements", "📣"),
)

# Shown by direct role check, not by module
ADMIN_NAV_ENTRY = NavEntry("/admin/users", "User Management", "👤")

ADMIN_ROLES = (Role.ADMIN.value, Role.SUPERADMIN.value)


def visible_nav_entries(
    user: Optional[User],
    entries: Optional[Iterable[NavEntry]] = None,
) -> List[NavEntry]:
    """
    Filter navigation entries down to what a user may see.

    Entries without a module requirement are visible to any authenticated
    user. The user management entry is appended for admins and superadmins.

    Args:
        user: The signed-in user, or None
        entries: Entries in display order (default: DEFAULT_NAV_ENTRIES)

    Returns:
        Visible entries, in their original order
    """
    if user is None:
        return []

    items = list(DEFAULT_NAV_ENTRIES if entries is None else entries)
    if user.role in ADMIN_ROLES and all(item.path != ADMIN_NAV_ENTRY.path for item in items):
        items.append(ADMIN_NAV_ENTRY)

    return [
        item for item in items
        if item.required_module is None or is_module_allowed(user, item.required_module)
    ]
