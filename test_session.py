"""
Unit tests for the session provider and token inspection.
"""

from datetime import datetime, timedelta, timezone

import jwt

from charterdesk.auth import JWTHandler, ModuleKey, Role
from charterdesk.config import DashboardConfig
from charterdesk.session import SessionProvider

from conftest import TEST_SECRET, make_token


class TestJWTHandler:
    """Test client-side token inspection."""

    def test_decode_valid_token(self):
        payload = JWTHandler().decode(make_token(sub="abc"))

        assert payload is not None
        assert payload.subject == "abc"
        assert payload.exp > datetime.now(timezone.utc)

    def test_decode_garbage(self):
        assert JWTHandler().decode("not-a-jwt") is None

    def test_decode_without_exp(self):
        token = jwt.encode({"sub": "abc"}, TEST_SECRET, algorithm="HS256")
        assert JWTHandler().decode(token) is None

    def test_expiry(self, valid_token, expired_token):
        handler = JWTHandler()
        assert handler.is_token_valid(valid_token)
        assert not handler.is_token_valid(expired_token)
        assert not handler.is_token_valid(None)
        assert not handler.is_token_valid("")

    def test_out_of_range_exp(self):
        assert JWTHandler().decode(make_token(expires_in=10**15)) is None

    def test_out_of_range_iat(self):
        assert JWTHandler().decode(make_token(iat=10**15)) is None

    def test_leeway(self):
        token = make_token(expires_in=-30)
        assert not JWTHandler().is_token_valid(token)
        assert JWTHandler(leeway_seconds=120).is_token_valid(token)

    def test_reference_time(self, valid_token):
        later = datetime.now(timezone.utc) + timedelta(hours=2)
        assert not JWTHandler().is_token_valid(valid_token, now=later)


class TestSessionProvider:
    """Test session restore, login, logout and notifications."""

    def test_starts_loading(self, provider):
        assert provider.loading
        assert provider.get_current_user() is None

    def test_restore_valid_session(self, provider, valid_token):
        session = provider.restore(valid_token, {
            "_id": "u1",
            "name": "Hana",
            "email": "hana@example.com",
            "role": "user",
            "allowedModules": ["hrms"],
        })

        assert session is not None
        assert not provider.loading
        assert provider.get_current_user().email == "hana@example.com"
        assert provider.has_valid_token()
        assert session.expires_at is not None

    def test_restore_expired_session(self, provider, expired_token, hr_user):
        assert provider.restore(expired_token, hr_user) is None
        assert not provider.loading
        assert provider.get_current_user() is None

    def test_restore_nothing_stored(self, provider):
        assert provider.restore(None, None) is None
        assert not provider.loading

    def test_restore_token_without_user(self, provider, valid_token):
        assert provider.restore(valid_token, None) is None

    def test_login_and_logout(self, provider, valid_token, hr_user):
        assert provider.login(valid_token, hr_user) is not None
        assert provider.get_current_user() == hr_user

        provider.logout()
        assert provider.get_current_user() is None
        assert not provider.has_valid_token()

    def test_login_with_bad_token(self, provider, hr_user):
        assert provider.login("garbage", hr_user) is None
        assert provider.get_current_user() is None
        assert not provider.loading

    def test_bound_checks_follow_current_user(self, provider, valid_token, hr_user, superadmin):
        assert not provider.is_module_allowed(ModuleKey.HRMS)

        provider.login(valid_token, hr_user)
        assert provider.is_module_allowed(ModuleKey.HRMS)
        assert not provider.is_module_allowed(ModuleKey.ACCOUNTING)
        assert not provider.is_role_allowed(Role.ADMIN)

        provider.login(valid_token, superadmin)
        assert provider.is_module_allowed(ModuleKey.ACCOUNTING)
        assert provider.is_role_allowed(Role.ADMIN)

    def test_on_session_change(self, provider, valid_token, hr_user):
        seen = []
        unsubscribe = provider.on_session_change(seen.append)

        provider.login(valid_token, hr_user)
        provider.logout()
        provider.logout()  # no change, no notification
        unsubscribe()
        provider.login(valid_token, hr_user)

        assert len(seen) == 2
        assert seen[0].user == hr_user
        assert seen[1] is None

    def test_failing_callback_does_not_break_others(self, provider, valid_token, hr_user):
        seen = []

        def broken(session):
            raise RuntimeError("boom")

        provider.on_session_change(broken)
        provider.on_session_change(seen.append)
        provider.login(valid_token, hr_user)

        assert len(seen) == 1

    def test_token_expiring_after_login(self, valid_token, hr_user):
        now = [datetime.now(timezone.utc)]
        provider = SessionProvider(clock=lambda: now[0])
        provider.login(valid_token, hr_user)
        assert provider.has_valid_token()

        now[0] += timedelta(hours=2)
        assert not provider.has_valid_token()
        # the snapshot stays until logout; guards check the token on each render
        assert provider.get_current_user() == hr_user

    def test_restore_with_out_of_range_exp(self, provider, hr_user):
        assert provider.restore(make_token(expires_in=10**15), hr_user) is None
        assert not provider.loading
        assert not provider.has_valid_token()

    def test_leeway_from_config(self, hr_user):
        token = make_token(expires_in=-30)
        provider = SessionProvider(DashboardConfig(token_leeway_seconds=120))
        assert provider.login(token, hr_user) is not None
