"""
Authorization module for the dashboard.

Provides user/session models, the module registry, role and module checks
and client-side token inspection.
"""

from .models import User, Session
from .modules import (
    ModuleKey,
    MODULE_NAMES,
    MODULE_DESCRIPTIONS,
    get_all_modules,
    get_module_name,
    get_module_description,
    parse_module,
)
from .jwt_handler import JWTHandler, TokenPayload
from .permissions import (
    Role,
    PermissionChecker,
    AccessDeniedError,
    is_module_allowed,
    is_role_allowed,
    require_module,
    require_role,
)

__all__ = [
    # Models
    "User",
    "Session",
    # Modules
    "ModuleKey",
    "MODULE_NAMES",
    "MODULE_DESCRIPTIONS",
    "get_all_modules",
    "get_module_name",
    "get_module_description",
    "parse_module",
    # Tokens
    "JWTHandler",
    "TokenPayload",
    # Role and module checks
    "Role",
    "PermissionChecker",
    "AccessDeniedError",
    "is_module_allowed",
    "is_role_allowed",
    "require_module",
    "require_role",
]
