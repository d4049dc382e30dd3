"""
API feature flags.

The flags are read once and passed to the dispatcher as an immutable value.
"""

import os
from dataclasses import dataclass

from repogate.exceptions import ConfigurationError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(name: str, value: str | None, default: bool) -> bool:
    """
    Parse a boolean environment value.

    Raises:
        ConfigurationError: If the value is not a recognized boolean
    """
    if value is None or not value.strip():
        return default

    token = value.strip().lower()
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False

    raise ConfigurationError(f"Invalid {name}: {value!r}. Must be true or false")


@dataclass(frozen=True)
class ApiConfig:
    """
    Feature flags for the management API.

    Attributes:
        api_enabled: When False every command fails with "API not enabled"
        api_auth: When False the signature gate is skipped; field validation
            and business rules still apply
    """

    api_enabled: bool = False
    api_auth: bool = True

    @classmethod
    def from_env(cls) -> "ApiConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            REPOGATE_API_ENABLED: Enable the management API (default: false)
            REPOGATE_API_AUTH: Require signed commands (default: true)

        Raises:
            ConfigurationError: If a variable holds an invalid boolean
        """
        return cls(
            api_enabled=parse_bool(
                "REPOGATE_API_ENABLED", os.environ.get("REPOGATE_API_ENABLED"), False
            ),
            api_auth=parse_bool(
                "REPOGATE_API_AUTH", os.environ.get("REPOGATE_API_AUTH"), True
            ),
        )
