"""
Shared fixtures: users, tokens and a session provider.
"""

import time

import jwt
import pytest

from charterdesk.auth import ModuleKey, User
from charterdesk.session import SessionProvider

TEST_SECRET = "charterdesk-test-signing-key-0123456789abcdef"


def make_token(expires_in: int = 3600, **claims) -> str:
    """Sign a token the way the auth API would."""
    now = int(time.time())
    payload = {"sub": "u1", "iat": now, "exp": now + expires_in}
    payload.update(claims)
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def hr_user():
    return User(
        user_id="u1",
        name="Hana Reyes",
        email="hana@example.com",
        role="user",
        allowed_modules=frozenset({ModuleKey.HRMS}),
    )


@pytest.fixture
def admin_user():
    return User(
        user_id="u2",
        name="Ari Admin",
        email="ari@example.com",
        role="admin",
        allowed_modules=frozenset({ModuleKey.FLIGHT_MANAGEMENT, ModuleKey.CLIENTS}),
    )


@pytest.fixture
def superadmin():
    return User(
        user_id="u0",
        name="Root",
        email="root@example.com",
        role="superadmin",
        allowed_modules=frozenset(),
    )


@pytest.fixture
def valid_token():
    return make_token()


@pytest.fixture
def expired_token():
    return make_token(expires_in=-60)


@pytest.fixture
def provider():
    return SessionProvider()
