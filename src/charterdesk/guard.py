"""
Route guards for protected views.

A guard is evaluated on every render of the view it protects and keeps no
state between evaluations: each mount starts again from CHECKING_SESSION.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from loguru import logger

from .auth.models import User
from .auth.modules import ModuleKey, parse_module
from .auth.permissions import ModuleLike, Role, RoleLike, is_module_allowed, is_role_allowed
from .config import DashboardConfig
from .session import SessionProvider


class GuardState(str, Enum):
    CHECKING_SESSION = "checking_session"
    DENIED_NO_SESSION = "denied_no_session"
    DENIED_ROLE = "denied_role"
    DENIED_MODULE = "denied_module"
    GRANTED = "granted"


@dataclass(frozen=True)
class GuardDecision:
    """
    Outcome of a guard evaluation.

    Attributes:
        state: Resolved guard state
        redirect_to: Path to redirect to (only for DENIED_NO_SESSION)
        message: Access-denied text (only for DENIED_ROLE/DENIED_MODULE)
    """
    state: GuardState
    redirect_to: Optional[str] = None
    message: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.state is GuardState.GRANTED


def resolve_guard_state(
    loading: bool,
    token_valid: bool,
    user: Optional[User],
    required_role: Optional[RoleLike] = None,
    required_module: Optional[ModuleLike] = None,
) -> GuardState:
    """
    Resolve a guard state from session facts.

    Args:
        loading: Whether the session fetch is still in flight
        token_valid: Whether a usable session token exists
        user: The signed-in user, or None
        required_role: Role the view requires, or None
        required_module: Module the view requires, or None

    Returns:
        GuardState for this render
    """
    if loading:
        return GuardState.CHECKING_SESSION

    if not token_valid or user is None:
        return GuardState.DENIED_NO_SESSION

    if required_role is not None and not is_role_allowed(user, required_role):
        return GuardState.DENIED_ROLE

    if required_module is not None and not is_module_allowed(user, required_module):
        return GuardState.DENIED_MODULE

    return GuardState.GRANTED


def _requirement_name(value) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass(frozen=True)
class RouteGuard:
    """
    Requirements of one protected view.

    Attributes:
        required_role: Role the view requires, or None
        required_module: Module the view requires, or None
    """
    required_role: Optional[RoleLike] = None
    required_module: Optional[ModuleLike] = None

    def __post_init__(self):
        # Known names become enums; unknown ones stay raw and never match
        if self.required_role is not None and not isinstance(self.required_role, Role):
            try:
                object.__setattr__(self, "required_role", Role(self.required_role))
            except ValueError:
                pass
        if self.required_module is not None:
            module = parse_module(self.required_module)
            if module is not None:
                object.__setattr__(self, "required_module", module)

    def evaluate(self, provider: SessionProvider) -> GuardDecision:
        """
        Evaluate the guard against the provider's current session.

        Args:
            provider: Session provider

        Returns:
            GuardDecision for this render
        """
        state = resolve_guard_state(
            loading=provider.loading,
            token_valid=not provider.loading and provider.has_valid_token(),
            user=provider.get_current_user(),
            required_role=self.required_role,
            required_module=self.required_module,
        )

        if state is GuardState.DENIED_NO_SESSION:
            return GuardDecision(state, redirect_to=provider.config.login_path)

        if state is GuardState.DENIED_ROLE:
            logger.debug(f"Role {_requirement_name(self.required_role)} required")
            return GuardDecision(
                state,
                message=(
                    "You don't have permission to access this page. "
                    f"Required role: {_requirement_name(self.required_role)}"
                ),
            )

        if state is GuardState.DENIED_MODULE:
            logger.debug(f"Module {_requirement_name(self.required_module)} required")
            return GuardDecision(
                state,
                message=f"You don't have access to the {_requirement_name(self.required_module)} module.",
            )

        return GuardDecision(state)


# Protected routes and what they require
ROUTE_GUARDS: Dict[str, RouteGuard] = {
    "/": RouteGuard(),
    "/hrms": RouteGuard(required_module=ModuleKey.HRMS),
    "/operations": RouteGuard(required_module=ModuleKey.FLIGHT_MANAGEMENT),
    "/flights": RouteGuard(required_module=ModuleKey.FLIGHT_MANAGEMENT),
    "/marketing": RouteGuard(required_module=ModuleKey.CAMPAIGNS),
    "/crm": RouteGuard(required_module=ModuleKey.CLIENTS),
    "/accounting": RouteGuard(required_module=ModuleKey.ACCOUNTING),
    "/tasks": RouteGuard(),
    "/announcements": RouteGuard(),
    "/admin/users": RouteGuard(required_role=Role.SUPERADMIN),
}


def resolve_route(path: str, config: Optional[DashboardConfig] = None) -> str:
    """
    Map a requested path onto a known route.

    Unknown paths fall back to the home route.
    """
    home = (config or DashboardConfig()).home_path
    if path in ROUTE_GUARDS:
        return path
    return home if home in ROUTE_GUARDS else "/"


def guard_for_path(path: str, config: Optional[DashboardConfig] = None) -> RouteGuard:
    return ROUTE_GUARDS[resolve_route(path, config)]
