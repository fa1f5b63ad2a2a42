"""
Dashboard configuration.

Defaults cover the stock dashboard; a YAML file can override any field.
"""

from pathlib import Path
from typing import List, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field

from .navigation import DEFAULT_NAV_ENTRIES, NavEntry


class DashboardConfig(BaseModel):
    """
    Settings shared by the session provider, route guards and sidebar.

    Attributes:
        login_path: Where unauthenticated visitors are redirected
        home_path: Fallback route for unknown paths
        token_leeway_seconds: Tolerated clock skew when checking token expiry
        navigation: Sidebar entries in display order
    """
    login_path: str = "/login"
    home_path: str = "/"
    token_leeway_seconds: int = Field(default=0, ge=0)
    navigation: List[NavEntry] = Field(default_factory=lambda: list(DEFAULT_NAV_ENTRIES))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DashboardConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            DashboardConfig with file values over the defaults

        Raises:
            pydantic.ValidationError: If a value is invalid
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        config = cls.model_validate(data)
        logger.debug(f"Loaded dashboard config from {path}")
        return config
