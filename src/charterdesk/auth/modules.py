"""
Dashboard module registry.

Every functional area of the dashboard is identified by a ModuleKey. The
same keys gate routes, navigation entries and a user's module assignments.
"""

from enum import Enum
from typing import Dict, List, Optional


class ModuleKey(str, Enum):
    """
    Enum of all functional areas in the dashboard.

    Values match the module names stored in a user's ``allowedModules``.
    """
    HRMS = "hrms"
    OPERATIONS = "operations"
    FLIGHT_MANAGEMENT = "flightManagement"
    CAMPAIGNS = "campaigns"                 # Marketing
    CLIENTS = "clients"                     # CRM
    ACCOUNTING = "accounting"
    TASK_TRACKER = "taskTracker"
    ANNOUNCEMENTS = "announcements"


MODULE_NAMES: Dict[ModuleKey, str] = {
    ModuleKey.HRMS: "HRMS",
    ModuleKey.OPERATIONS: "Operations",
    ModuleKey.FLIGHT_MANAGEMENT: "Flight Management",
    ModuleKey.CAMPAIGNS: "Marketing",
    ModuleKey.CLIENTS: "CRM",
    ModuleKey.ACCOUNTING: "Accounting",
    ModuleKey.TASK_TRACKER: "Task Tracker",
    ModuleKey.ANNOUNCEMENTS: "Announcements",
}

MODULE_DESCRIPTIONS: Dict[ModuleKey, str] = {
    ModuleKey.HRMS: "Human Resource Management System",
    ModuleKey.OPERATIONS: "Operations Management",
    ModuleKey.FLIGHT_MANAGEMENT: "Flight operations and scheduling",
    ModuleKey.CAMPAIGNS: "Marketing campaigns and analytics",
    ModuleKey.CLIENTS: "Client relationship management",
    ModuleKey.ACCOUNTING: "Financial records and accounting",
    ModuleKey.TASK_TRACKER: "Task tracking and management",
    ModuleKey.ANNOUNCEMENTS: "System announcements",
}


def parse_module(value) -> Optional[ModuleKey]:
    """
    Convert a module name to a ModuleKey.

    Args:
        value: ModuleKey or raw module name (e.g. "accounting")

    Returns:
        ModuleKey, or None if the name is not a known module
    """
    if isinstance(value, ModuleKey):
        return value
    try:
        return ModuleKey(value)
    except ValueError:
        return None


def get_all_modules() -> List[ModuleKey]:
    return list(ModuleKey)


def get_module_name(module) -> str:
    """Display name for a module, or the raw key if unknown."""
    key = parse_module(module)
    if key is None:
        return str(module)
    return MODULE_NAMES[key]


def get_module_description(module) -> str:
    """Description for a module, or an empty string if unknown."""
    key = parse_module(module)
    if key is None:
        return ""
    return MODULE_DESCRIPTIONS[key]
