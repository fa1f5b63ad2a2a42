"""
Authentication data models.

Immutable snapshots of the signed-in user and the session holding them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, FrozenSet, Mapping, Optional

from loguru import logger

from .modules import ModuleKey, parse_module


@dataclass(frozen=True)
class User:
    """
    Dashboard user as returned by the auth API.

    Attributes:
        user_id: Unique user identifier
        name: Display name
        email: User email address
        role: Role name ("user", "admin" or "superadmin")
        allowed_modules: Modules assigned to this user
    """
    user_id: str
    name: str
    email: str
    role: str
    allowed_modules: FrozenSet[ModuleKey] = field(default_factory=frozenset)

    def __post_init__(self):
        # Raw module names become ModuleKey; unknown names are dropped
        modules = frozenset(
            key for key in (parse_module(m) for m in self.allowed_modules) if key is not None
        )
        object.__setattr__(self, "allowed_modules", modules)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "User":
        """
        Build a User from an API user object.

        Unknown module names in ``allowedModules`` are dropped.

        Args:
            payload: User JSON (``_id``/``id``, ``name``, ``email``, ``role``,
                ``allowedModules``)

        Returns:
            User snapshot
        """
        modules = set()
        for name in payload.get("allowedModules") or []:
            module = parse_module(name)
            if module is None:
                logger.debug(f"Ignoring unknown module '{name}' for user {payload.get('email')}")
                continue
            modules.add(module)

        user_id = payload.get("_id", payload.get("id"))
        return cls(
            user_id=str(user_id) if user_id is not None else "",
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            role=payload.get("role") or "user",
            allowed_modules=frozenset(modules),
        )


@dataclass(frozen=True)
class Session:
    """
    Authenticated session snapshot.

    Attributes:
        token: Access token (JWT) issued by the auth API
        user: User the token belongs to
        expires_at: Token expiration, from the ``exp`` claim
    """
    token: str
    user: User
    expires_at: Optional[datetime] = None
