"""Configuration for the Spidra MCP server."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from spidra_mcp.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.spidra.io/api"

API_KEY_ENV = "SPIDRA_API_KEY"
BASE_URL_ENV = "SPIDRA_API_BASE"
TIMEOUT_ENV = "SPIDRA_TIMEOUT"


@dataclass(frozen=True)
class SpidraConfig:
    """Connection settings for the Spidra API.

    Loaded once at process start and passed explicitly to the client.

    Attributes:
        api_key: Credential sent as the x-api-key header.
        base_url: API root, without trailing slash.
        timeout: Total request timeout in seconds. None keeps the aiohttp default.
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SpidraConfig:
        """Load configuration from environment variables.

        Raises:
            ConfigurationError: If SPIDRA_API_KEY is missing or a value is malformed.
        """
        env = os.environ if environ is None else environ

        api_key = env.get(API_KEY_ENV, "").strip()
        if not api_key:
            raise ConfigurationError(f"{API_KEY_ENV} environment variable is required")

        base_url = env.get(BASE_URL_ENV, "").strip().rstrip("/") or DEFAULT_BASE_URL

        timeout = None
        raw_timeout = env.get(TIMEOUT_ENV, "").strip()
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}"
                ) from e
            if timeout <= 0:
                raise ConfigurationError(f"{TIMEOUT_ENV} must be positive, got {raw_timeout!r}")

        return cls(api_key=api_key, base_url=base_url, timeout=timeout)
