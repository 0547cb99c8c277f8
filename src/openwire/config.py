"""Configuration: Frozen Config with credential and endpoint resolution."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from openwire._http import DEFAULT_BASE_URL
from openwire.errors import ConfigurationError

load_dotenv()

_API_KEY_ENV_VAR = "OPENAI_API_KEY"
_BASE_URL_ENV_VAR = "OPENAI_BASE_URL"
_ORGANIZATION_ENV_VAR = "OPENAI_ORGANIZATION"
_PROJECT_ENV_VAR = "OPENAI_PROJECT"


@dataclass(frozen=True)
class Config:
    """Immutable client configuration.

    Unset fields are auto-resolved from standard environment variables
    (a ``.env`` file is honored).

    Example:
        config = Config()
        # API key is automatically resolved from OPENAI_API_KEY
    """

    #: Auto-resolved from ``OPENAI_API_KEY`` when *None*.
    api_key: str | None = None
    #: Auto-resolved from ``OPENAI_BASE_URL``; defaults to the public API.
    base_url: str | None = None
    #: Sent as ``OpenAI-Organization`` when set.
    organization: str | None = None
    #: Sent as ``OpenAI-Project`` when set.
    project: str | None = None
    timeout_s: float = 300.0

    def __post_init__(self) -> None:
        """Auto-resolve environment values and validate configuration."""
        if self.api_key is None:
            object.__setattr__(self, "api_key", os.environ.get(_API_KEY_ENV_VAR))
        if self.base_url is None:
            resolved = os.environ.get(_BASE_URL_ENV_VAR) or DEFAULT_BASE_URL
            object.__setattr__(self, "base_url", resolved)
        if self.organization is None:
            object.__setattr__(
                self, "organization", os.environ.get(_ORGANIZATION_ENV_VAR) or None
            )
        if self.project is None:
            object.__setattr__(
                self, "project", os.environ.get(_PROJECT_ENV_VAR) or None
            )

        if not self.api_key:
            raise ConfigurationError(
                "API key required",
                hint=f"Set {_API_KEY_ENV_VAR} environment variable or pass api_key=...",
            )

        base_url = self.base_url or ""
        if not base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"base_url must be an http(s) URL, got {base_url!r}",
                hint=f"Set {_BASE_URL_ENV_VAR} or pass base_url='{DEFAULT_BASE_URL}'.",
            )
        # Endpoint paths start with "/", so keep exactly one separator.
        object.__setattr__(self, "base_url", base_url.rstrip("/"))

        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This bounds each HTTP exchange, in seconds.",
            )

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(base_url={self.base_url!r}, "
            f"api_key={'[REDACTED]' if self.api_key else None}, "
            f"organization={self.organization!r}, project={self.project!r})"
        )

    __repr__ = __str__
