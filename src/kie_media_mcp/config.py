"""Credentials and origin configuration, read from the environment."""

import logging
import os
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_DOMAIN = "https://api.kie.ai"

# File storage lives on its own host; same bearer token as the jobs API.
FILE_UPLOAD_ORIGIN = "https://kieai.redpandaai.co"

# Endpoint used to check that a key is accepted.
CREDENTIAL_TEST_PATH = "/api/v1/chat/credit"


@dataclass(frozen=True)
class Credentials:
    """Kie.ai API key plus the jobs API domain."""

    api_key: str
    domain: str = DEFAULT_DOMAIN

    def __post_init__(self):
        if not self.api_key:
            raise ConfigError("Kie.ai API key is empty. Set KIE_API_KEY.")
        object.__setattr__(self, "domain", (self.domain or DEFAULT_DOMAIN).rstrip("/"))

    @property
    def authorization(self) -> str:
        return f"Bearer {self.api_key}"

    @classmethod
    def from_env(cls) -> "Credentials":
        """Build credentials from KIE_API_KEY and KIE_DOMAIN."""
        api_key = os.environ.get("KIE_API_KEY", "")
        if not api_key:
            raise ConfigError("KIE_API_KEY is not set")
        return cls(api_key=api_key, domain=os.environ.get("KIE_DOMAIN", DEFAULT_DOMAIN))

    def __repr__(self) -> str:
        return f"Credentials(api_key='***', domain={self.domain!r})"


def get_log_level() -> str:
    """Log level for the kie-mcp logger (KIE_LOG_LEVEL, default INFO; unknown names fall back to INFO)."""
    level = os.environ.get("KIE_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level
