"""
Session provider.

Holds the current session as an immutable snapshot and hands it to
consumers through a narrow interface. Consumers never read or write token
storage themselves; whoever owns storage calls ``restore``, ``login`` and
``logout``.
"""

from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union

from loguru import logger

from .config import DashboardConfig
from .auth.jwt_handler import JWTHandler
from .auth.models import Session, User
from .auth.permissions import ModuleLike, RoleLike, is_module_allowed, is_role_allowed
from .navigation import NavEntry, visible_nav_entries

SessionCallback = Callable[[Optional[Session]], None]


class SessionProvider:
    """
    Current-session holder.

    Provides:
    - Session restore from a stored token and user
    - Login/logout replacing the snapshot
    - Change notifications
    - Module and role checks bound to the current user
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize provider.

        The provider starts in the loading state until ``restore``,
        ``login`` or ``logout`` resolves it.

        Args:
            config: Dashboard configuration (default: DashboardConfig())
            clock: Returns the current UTC time; used for token expiry
        """
        self.config = config or DashboardConfig()
        self.jwt = JWTHandler(leeway_seconds=self.config.token_leeway_seconds)
        self._clock = clock
        self._session: Optional[Session] = None
        self._loading = True
        self._callbacks: List[SessionCallback] = []

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def get_current_user(self) -> Optional[User]:
        """Return the signed-in user, or None."""
        if self._session is None:
            return None
        return self._session.user

    def has_valid_token(self) -> bool:
        """
        Check that the current session's token is still unexpired.

        Returns:
            True if a session exists and its token can be used
        """
        if self._session is None:
            return False
        return self.jwt.is_token_valid(self._session.token, self._now())

    def restore(
        self,
        token: Optional[str],
        user: Union[User, Mapping[str, Any], None],
    ) -> Optional[Session]:
        """
        Restore a previously stored session.

        The session is accepted only when both parts are present and the
        token is unexpired. Either way, loading ends.

        Args:
            token: Stored access token
            user: Stored user (User or API user object)

        Returns:
            The restored Session, or None
        """
        session = None
        if token and user:
            session = self._build_session(token, user)
            if session is None:
                logger.warning("Stored session discarded")

        self._loading = False
        self._set_session(session)
        return session

    def login(self, token: str, user: Union[User, Mapping[str, Any]]) -> Optional[Session]:
        """
        Start a session from an auth API login response.

        Args:
            token: Access token from the login response
            user: User from the login response

        Returns:
            The new Session, or None if the token is unusable
        """
        session = self._build_session(token, user)
        self._loading = False
        if session is None:
            logger.warning("Login failed: invalid response from server")
            return None

        logger.info(f"User logged in: {session.user.email}")
        self._set_session(session)
        return session

    def logout(self) -> None:
        """End the current session."""
        if self._session is not None:
            logger.info(f"User logged out: {self._session.user.email}")
        self._loading = False
        self._set_session(None)

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """
        Subscribe to session changes.

        Args:
            callback: Called with the new Session (or None) on every change

        Returns:
            Function removing the subscription
        """
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def is_module_allowed(self, module: Optional[ModuleLike]) -> bool:
        """Module check against the signed-in user."""
        return is_module_allowed(self.get_current_user(), module)

    def is_role_allowed(self, required_role: Optional[RoleLike]) -> bool:
        """Role check against the signed-in user."""
        return is_role_allowed(self.get_current_user(), required_role)

    def visible_nav_entries(self) -> List[NavEntry]:
        """
        Sidebar entries for the signed-in user.

        Uses the configured navigation, filtered by module and admin role.
        """
        return visible_nav_entries(self.get_current_user(), self.config.navigation)

    def _build_session(
        self,
        token: str,
        user: Union[User, Mapping[str, Any]],
    ) -> Optional[Session]:
        if not token or not user:
            return None

        payload = self.jwt.decode(token)
        if payload is None or self.jwt.is_expired(payload, self._now()):
            return None

        if not isinstance(user, User):
            user = User.from_payload(user)

        return Session(token=token, user=user, expires_at=payload.exp)

    def _set_session(self, session: Optional[Session]) -> None:
        changed = session != self._session
        self._session = session
        if not changed:
            return

        for callback in list(self._callbacks):
            try:
                callback(session)
            except Exception as e:
                logger.error(f"Session change callback failed: {e}")

    def _now(self) -> Optional[datetime]:
        if self._clock is None:
            return None
        return self._clock()
