"""spidra-mcp: Spidra scraping API as MCP tools."""

# All errors (foundational)
from spidra_mcp.errors import (
    ConfigurationError,
    RemoteAPIError,
    SpidraError,
    TransportError,
)
from spidra_mcp.config import SpidraConfig
from spidra_mcp.types import (
    BrowserAction,
    Cookie,
    RequestValidation,
    ScrapeJobHandle,
    ScrapeProgress,
    ScrapeRequest,
    ScrapeResult,
    ScrapeStats,
    ScrapeStatus,
    ScrapeTarget,
    validate_scrape_request,
)
from spidra_mcp.client import ApiResult, SpidraClient
from spidra_mcp.adapter import ScrapeToolAdapter

__version__ = "0.1.0"

__all__ = [
    # Core
    "ScrapeToolAdapter",
    "SpidraClient",
    "SpidraConfig",
    "ApiResult",
    # Types
    "BrowserAction",
    "Cookie",
    "RequestValidation",
    "ScrapeJobHandle",
    "ScrapeProgress",
    "ScrapeRequest",
    "ScrapeResult",
    "ScrapeStats",
    "ScrapeStatus",
    "ScrapeTarget",
    "validate_scrape_request",
    # Errors
    "SpidraError",
    "RemoteAPIError",
    "TransportError",
    "ConfigurationError",
]
