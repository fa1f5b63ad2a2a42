"""
Unit tests for route guards and navigation filtering.
"""

import pytest

from charterdesk.auth import ModuleKey, Role, User
from charterdesk.config import DashboardConfig
from charterdesk.guard import (
    GuardState,
    RouteGuard,
    guard_for_path,
    resolve_guard_state,
    resolve_route,
)
from charterdesk.navigation import ADMIN_NAV_ENTRY, NavEntry, visible_nav_entries
from charterdesk.session import SessionProvider


class TestResolveGuardState:
    """Test the guard state transitions."""

    def test_checking_while_loading(self, hr_user):
        assert resolve_guard_state(True, True, hr_user) is GuardState.CHECKING_SESSION

    def test_no_token(self, hr_user):
        assert resolve_guard_state(False, False, hr_user) is GuardState.DENIED_NO_SESSION

    def test_no_user(self):
        assert resolve_guard_state(False, True, None) is GuardState.DENIED_NO_SESSION

    def test_role_checked_before_module(self, hr_user):
        state = resolve_guard_state(
            False, True, hr_user,
            required_role=Role.ADMIN,
            required_module=ModuleKey.ACCOUNTING,
        )
        assert state is GuardState.DENIED_ROLE

    def test_module_denied(self):
        """A user with only hrms can't open accounting."""
        user = User("u9", "Kim", "kim@example.com", "user", frozenset({ModuleKey.HRMS}))
        state = resolve_guard_state(False, True, user, required_module=ModuleKey.ACCOUNTING)
        assert state is GuardState.DENIED_MODULE

    def test_granted_without_requirements(self, hr_user):
        assert resolve_guard_state(False, True, hr_user) is GuardState.GRANTED

    def test_superadmin_passes_everything(self, superadmin):
        state = resolve_guard_state(
            False, True, superadmin,
            required_role=Role.ADMIN,
            required_module=ModuleKey.ACCOUNTING,
        )
        assert state is GuardState.GRANTED


class TestRouteGuard:
    """Test guards evaluated against a session provider."""

    def test_checking_session_before_restore(self, provider):
        decision = RouteGuard().evaluate(provider)
        assert decision.state is GuardState.CHECKING_SESSION
        assert not decision.granted

    def test_redirects_to_login(self, provider):
        provider.restore(None, None)
        decision = RouteGuard().evaluate(provider)

        assert decision.state is GuardState.DENIED_NO_SESSION
        assert decision.redirect_to == "/login"
        assert decision.message is None

    def test_redirect_uses_configured_login_path(self):
        provider = SessionProvider(DashboardConfig(login_path="/signin"))
        provider.restore(None, None)
        assert RouteGuard().evaluate(provider).redirect_to == "/signin"

    def test_module_denied_message(self, provider, valid_token, hr_user):
        provider.login(valid_token, hr_user)
        decision = RouteGuard(required_module=ModuleKey.ACCOUNTING).evaluate(provider)

        assert decision.state is GuardState.DENIED_MODULE
        assert decision.redirect_to is None
        assert decision.message == "You don't have access to the accounting module."

    def test_role_denied_message(self, provider, valid_token, admin_user):
        provider.login(valid_token, admin_user)
        decision = RouteGuard(required_role=Role.SUPERADMIN).evaluate(provider)

        assert decision.state is GuardState.DENIED_ROLE
        assert decision.message.endswith("Required role: superadmin")

    def test_granted(self, provider, valid_token, hr_user):
        provider.login(valid_token, hr_user)
        assert RouteGuard(required_module=ModuleKey.HRMS).evaluate(provider).granted

    def test_reevaluated_after_logout(self, provider, valid_token, hr_user):
        guard = RouteGuard(required_module=ModuleKey.HRMS)
        provider.login(valid_token, hr_user)
        assert guard.evaluate(provider).granted

        provider.logout()
        assert guard.evaluate(provider).state is GuardState.DENIED_NO_SESSION

    def test_expired_token_denies_session(self, provider, expired_token, hr_user):
        provider.restore(expired_token, hr_user)
        assert RouteGuard().evaluate(provider).state is GuardState.DENIED_NO_SESSION


class TestRouteTable:
    """Test the protected route table."""

    @pytest.mark.parametrize("path,module", [
        ("/hrms", ModuleKey.HRMS),
        ("/operations", ModuleKey.FLIGHT_MANAGEMENT),
        ("/flights", ModuleKey.FLIGHT_MANAGEMENT),
        ("/marketing", ModuleKey.CAMPAIGNS),
        ("/crm", ModuleKey.CLIENTS),
        ("/accounting", ModuleKey.ACCOUNTING),
    ])
    def test_module_routes(self, path, module):
        assert guard_for_path(path).required_module is module

    def test_admin_route_requires_superadmin(self):
        guard = guard_for_path("/admin/users")
        assert guard.required_role is Role.SUPERADMIN
        assert guard.required_module is None

    def test_unknown_path_falls_back_to_home(self):
        assert resolve_route("/nope") == "/"
        assert guard_for_path("/nope") == RouteGuard()


class TestNavigation:
    """Test sidebar filtering."""

    def test_anonymous_sees_nothing(self):
        assert visible_nav_entries(None) == []

    def test_regular_user(self, hr_user):
        paths = [e.path for e in visible_nav_entries(hr_user)]
        assert paths == ["/", "/hrms", "/tasks", "/announcements"]

    def test_admin_gets_user_management(self, admin_user):
        paths = [e.path for e in visible_nav_entries(admin_user)]
        assert paths == [
            "/", "/operations", "/flights", "/crm", "/tasks", "/announcements", "/admin/users",
        ]

    def test_superadmin_sees_all(self, superadmin):
        entries = visible_nav_entries(superadmin)
        assert len(entries) == 9
        assert entries[-1] == ADMIN_NAV_ENTRY

    def test_custom_entries(self, hr_user):
        entries = [
            NavEntry("/books", "Books", required_module=ModuleKey.ACCOUNTING),
            NavEntry("/people", "People", required_module=ModuleKey.HRMS),
        ]
        assert [e.path for e in visible_nav_entries(hr_user, entries)] == ["/people"]


class TestStringRequirements:
    """Test guards declared with plain role and module names."""

    def test_names_become_enums(self):
        guard = RouteGuard(required_role="superadmin", required_module="accounting")
        assert guard.required_role is Role.SUPERADMIN
        assert guard.required_module is ModuleKey.ACCOUNTING

    def test_module_name_denied(self, provider, valid_token):
        user = User("u9", "Kim", "kim@example.com", "user", frozenset({ModuleKey.HRMS}))
        provider.login(valid_token, user)

        decision = RouteGuard(required_module="accounting").evaluate(provider)

        assert decision.state is GuardState.DENIED_MODULE
        assert decision.message == "You don't have access to the accounting module."

    def test_role_name_denied(self, provider, valid_token, hr_user):
        provider.login(valid_token, hr_user)

        decision = RouteGuard(required_role="admin").evaluate(provider)

        assert decision.state is GuardState.DENIED_ROLE
        assert decision.message.endswith("Required role: admin")

    def test_unknown_names_deny(self, provider, valid_token, hr_user):
        provider.login(valid_token, hr_user)

        module_decision = RouteGuard(required_module="payroll").evaluate(provider)
        role_decision = RouteGuard(required_role="pilot").evaluate(provider)

        assert module_decision.state is GuardState.DENIED_MODULE
        assert module_decision.message == "You don't have access to the payroll module."
        assert role_decision.state is GuardState.DENIED_ROLE
        assert role_decision.message.endswith("Required role: pilot")


class TestConfiguredNavigation:
    """Test that the provider's sidebar follows the configured entries."""

    def test_provider_uses_config_navigation(self, valid_token, hr_user):
        config = DashboardConfig(navigation=[
            NavEntry("/x", "X"),
            NavEntry("/books", "Books", required_module=ModuleKey.ACCOUNTING),
        ])
        provider = SessionProvider(config)
        provider.login(valid_token, hr_user)

        assert [e.path for e in provider.visible_nav_entries()] == ["/x"]

    def test_provider_default_navigation(self, provider, valid_token, hr_user):
        provider.login(valid_token, hr_user)
        paths = [e.path for e in provider.visible_nav_entries()]
        assert paths == ["/", "/hrms", "/tasks", "/announcements"]

    def test_provider_without_session(self, provider):
        provider.restore(None, None)
        assert provider.visible_nav_entries() == []
