"""
JWT token inspection.

The dashboard receives its access token from the auth API and never holds
the signing key, so tokens are decoded without signature verification and
checked only for expiry, the way a browser client treats them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from loguru import logger


@dataclass
class TokenPayload:
    """
    Decoded JWT payload.

    Attributes:
        subject: Token subject (``sub`` claim), usually the user id
        exp: Expiration timestamp
        iat: Issued at timestamp, if present
        claims: All raw claims
    """
    subject: Optional[str]
    exp: datetime
    iat: Optional[datetime] = None
    claims: Dict[str, Any] = field(default_factory=dict)


class JWTHandler:
    """
    JWT token inspector.

    Decodes access tokens and reports whether they are still usable.
    """

    def __init__(self, leeway_seconds: int = 0):
        """
        Initialize handler.

        Args:
            leeway_seconds: Tolerated clock skew when checking expiry
        """
        self.leeway = timedelta(seconds=leeway_seconds)

    def decode(self, token: str) -> Optional[TokenPayload]:
        """
        Decode token claims without verifying the signature.

        Args:
            token: JWT token string

        Returns:
            TokenPayload if the token is well formed and carries ``exp``,
            None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                options={"verify_signature": False, "verify_exp": False},
            )
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            return None

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            logger.warning("Token has no usable exp claim")
            return None

        iat = payload.get("iat")
        sub = payload.get("sub")
        try:
            expires = datetime.fromtimestamp(exp, tz=timezone.utc)
            issued = datetime.fromtimestamp(iat, tz=timezone.utc) if isinstance(iat, (int, float)) else None
        except (OverflowError, OSError, ValueError) as e:
            logger.warning(f"Token timestamps out of range: {e}")
            return None

        return TokenPayload(
            subject=str(sub) if sub is not None else None,
            exp=expires,
            iat=issued,
            claims=payload,
        )

    def is_expired(self, payload: TokenPayload, now: Optional[datetime] = None) -> bool:
        """
        Check whether a decoded token has expired.

        Args:
            payload: Decoded token
            now: Reference time (default: current UTC time)

        Returns:
            True if ``exp`` is not in the future
        """
        if now is None:
            now = datetime.now(timezone.utc)
        return payload.exp + self.leeway <= now

    def is_token_valid(self, token: Optional[str], now: Optional[datetime] = None) -> bool:
        """
        Check that a token is present, decodable and unexpired.

        Args:
            token: JWT token string, or None
            now: Reference time (default: current UTC time)

        Returns:
            True if the token can still be used
        """
        if not token:
            return False

        payload = self.decode(token)
        if payload is None:
            return False

        if self.is_expired(payload, now):
            logger.warning("Token has expired")
            return False

        return True
