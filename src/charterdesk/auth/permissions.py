"""
Role and module authorization for the dashboard.

This module provides:
- Role definitions
- Module and role checks used by route guards and navigation
- Raising variants for imperative callers

Superadmin bypasses every check. There is no ordering between the other
roles: a role requirement is satisfied only by that exact role.
"""

from enum import Enum
from typing import List, Optional, Union

from loguru import logger

from .models import User
from .modules import ModuleKey, parse_module


class Role(str, Enum):
    """
    Dashboard roles.
    """
    USER = "user"                   # Module-gated access
    ADMIN = "admin"                 # Module-gated access plus user management entry
    SUPERADMIN = "superadmin"       # Full access to all modules and roles


ModuleLike = Union[ModuleKey, str]
RoleLike = Union[Role, str]


def _role_value(role: RoleLike) -> str:
    return role.value if isinstance(role, Role) else str(role)


class PermissionChecker:
    """
    Checks whether a user can reach a module or a role-gated view.

    Every call evaluates its inputs afresh; nothing is cached between calls
    since the signed-in user can change between renders.
    """

    def is_superadmin(self, user: Optional[User]) -> bool:
        return user is not None and user.role == Role.SUPERADMIN.value

    def is_module_allowed(self, user: Optional[User], module: Optional[ModuleLike]) -> bool:
        """
        Check if a user can access a module.

        Args:
            user: The signed-in user, or None when not authenticated
            module: The required module, or None for no requirement

        Returns:
            bool: True if the user can access the module, False otherwise
        """
        if user is None:
            return False

        if self.is_superadmin(user):
            return True

        if module is None:
            return True

        key = parse_module(module)
        if key is None:
            # Unknown module, nobody but superadmin holds it
            return False

        return key in user.allowed_modules

    def is_role_allowed(self, user: Optional[User], required_role: Optional[RoleLike]) -> bool:
        """
        Check if a user satisfies a role requirement.

        Args:
            user: The signed-in user, or None when not authenticated
            required_role: The required role, or None for no requirement

        Returns:
            bool: True if the requirement is met, False otherwise
        """
        if required_role is None:
            return True

        if user is None:
            return False

        if self.is_superadmin(user):
            return True

        return user.role == _role_value(required_role)

    def get_allowed_modules(self, user: Optional[User]) -> List[ModuleKey]:
        """
        Get every module the user can access, in registry order.

        Args:
            user: The signed-in user

        Returns:
            List[ModuleKey]: Accessible modules
        """
        return [module for module in ModuleKey if self.is_module_allowed(user, module)]


class AccessDeniedError(Exception):
    """
    Raised when a user attempts to reach a view they are not allowed to.

    Attributes:
        user_id: The user who was denied (None when not authenticated)
        action: The action that was denied
        required: The role or module that was required
    """

    def __init__(
        self,
        user_id: Optional[str],
        action: str,
        required: Optional[str] = None,
    ):
        self.user_id = user_id
        self.action = action
        self.required = required

        message = f"User {user_id or '<anonymous>'} denied access: {action}"
        if required:
            message += f" (requires: {required})"

        super().__init__(message)


# Global permission checker instance
_permission_checker = PermissionChecker()


def is_module_allowed(user: Optional[User], module: Optional[ModuleLike]) -> bool:
    """
    Global helper to check module access.

    Args:
        user: The signed-in user, or None
        module: The required module, or None

    Returns:
        bool: True if authorized, False otherwise
    """
    return _permission_checker.is_module_allowed(user, module)


def is_role_allowed(user: Optional[User], required_role: Optional[RoleLike]) -> bool:
    """
    Global helper to check a role requirement.

    Args:
        user: The signed-in user, or None
        required_role: The required role, or None

    Returns:
        bool: True if authorized, False otherwise
    """
    return _permission_checker.is_role_allowed(user, required_role)


def require_module(user: Optional[User], module: ModuleLike) -> None:
    """
    Require module access, raising AccessDeniedError if not authorized.

    Args:
        user: The signed-in user, or None
        module: The required module

    Raises:
        AccessDeniedError: If the user can't access the module
    """
    if not is_module_allowed(user, module):
        required = module.value if isinstance(module, ModuleKey) else str(module)
        logger.debug(f"Module access denied: {required}")
        raise AccessDeniedError(
            user_id=user.user_id if user else None,
            action=f"open module '{required}'",
            required=required,
        )


def require_role(user: Optional[User], required_role: RoleLike) -> None:
    """
    Require a role, raising AccessDeniedError if not authorized.

    Args:
        user: The signed-in user, or None
        required_role: The required role

    Raises:
        AccessDeniedError: If the user doesn't hold the role
    """
    if not is_role_allowed(user, required_role):
        required = _role_value(required_role)
        logger.debug(f"Role requirement not met: {required}")
        raise AccessDeniedError(
            user_id=user.user_id if user else None,
            action="open role-restricted view",
            required=required,
        )
