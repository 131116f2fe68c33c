"""MCP server exposing the Spidra scrape API as two tools.

Usage:
    SPIDRA_API_KEY=... spidra-mcp

    # With Claude Code
    claude mcp add spidra -e SPIDRA_API_KEY=... -- spidra-mcp

Tools:
    submit_scrape_job - queue 1-3 URLs for scraping, returns a job ID
    get_scrape_status - poll a job until it is completed or failed
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Annotated, Literal

from fastmcp import FastMCP
from pydantic import Field

from spidra_mcp import __version__
from spidra_mcp.adapter import ScrapeToolAdapter
from spidra_mcp.client import SpidraClient
from spidra_mcp.config import SpidraConfig
from spidra_mcp.errors import ConfigurationError
from spidra_mcp.types import MAX_URLS, MIN_URLS, ScrapeTarget

logger = logging.getLogger(__name__)

SERVER_NAME = "spidra"

SUBMIT_DESCRIPTION = (
    "Submit URLs for scraping with optional browser actions and AI extraction. "
    "Returns a job ID that can be used to poll for results."
)
STATUS_DESCRIPTION = (
    "Get the status and results of a scrape job. "
    "Poll every 2-5 seconds until status is 'completed' or 'failed'."
)


def create_server(adapter: ScrapeToolAdapter) -> FastMCP:
    """Build the FastMCP server with both tools bound to ``adapter``."""
    mcp = FastMCP(SERVER_NAME, version=__version__)

    @mcp.tool(name="submit_scrape_job", description=SUBMIT_DESCRIPTION)
    async def submit_scrape_job(
        urls: Annotated[
            list[ScrapeTarget],
            Field(
                min_length=MIN_URLS,
                max_length=MAX_URLS,
                description="Array of URLs to scrape (1-3 URLs per request)",
            ),
        ],
        prompt: Annotated[
            str | None,
            Field(
                description="Optional LLM prompt for extracting or transforming the scraped content"
            ),
        ] = None,
        output: Annotated[
            Literal["json", "markdown"] | None,
            Field(description="Output format for the extracted content"),
        ] = None,
        useProxy: Annotated[  # noqa: N803
            bool | None,
            Field(description="Enable stealth mode with proxy rotation to avoid detection"),
        ] = None,
    ) -> str:
        return await adapter.submit_scrape_job(
            urls, prompt=prompt, output=output, use_proxy=useProxy
        )

    @mcp.tool(name="get_scrape_status", description=STATUS_DESCRIPTION)
    async def get_scrape_status(
        jobId: Annotated[  # noqa: N803
            str, Field(description="The job ID returned from submit_scrape_job")
        ],
    ) -> str:
        return await adapter.get_scrape_status(jobId)

    return mcp


def main() -> None:
    parser = argparse.ArgumentParser(
        description="MCP server for the Spidra scraping API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  SPIDRA_API_KEY   API key (required)
  SPIDRA_API_BASE  API root (default: https://api.spidra.io/api)
  SPIDRA_TIMEOUT   Request timeout in seconds (default: aiohttp default)

Examples:
  SPIDRA_API_KEY=sk-... spidra-mcp

  # Add to Claude Code
  claude mcp add spidra -e SPIDRA_API_KEY=sk-... -- spidra-mcp
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr output (default: WARNING)",
    )
    args = parser.parse_args()

    # stdout carries the MCP stdio transport
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SpidraConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    mcp = create_server(ScrapeToolAdapter(SpidraClient(config)))
    logger.info("Spidra MCP server running on stdio (%s)", config.base_url)

    # Run MCP server (stdio transport by default)
    mcp.run()


if __name__ == "__main__":
    main()
