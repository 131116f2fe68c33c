"""Error types for spidra-mcp.

All errors inherit from SpidraError for easy catching at the tool boundary.
"""

from __future__ import annotations


class SpidraError(Exception):
    """Base class for all spidra-mcp errors."""

    pass


class RemoteAPIError(SpidraError):
    """Raised when the Spidra API answers with a non-2xx status or an unusable body."""

    def __init__(self, status_code: int, body: str, detail: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.detail = detail
        msg = f"Spidra API error ({status_code}): "
        if detail:
            msg += f"{detail}: "
        super().__init__(msg + body)


class TransportError(SpidraError):
    """Raised when a request could not be completed (DNS, refused, timeout)."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        reason = str(cause) or type(cause).__name__
        super().__init__(f"Could not reach Spidra API: {reason}")


class ConfigurationError(SpidraError):
    """Error in startup configuration (missing credential, bad value)."""

    pass
