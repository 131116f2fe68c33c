"""The two scrape tools, independent of the MCP transport.

Each operation returns text in every case: a confirmation or report on
success, a readable failure line when validation, the network or the remote
API fails. Nothing here raises for a bad call.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from spidra_mcp.client import SpidraClient
from spidra_mcp.formatting import format_failure, format_job_submitted, format_status_report
from spidra_mcp.types import validate_scrape_request

logger = logging.getLogger(__name__)


class ScrapeToolAdapter:
    """Translate tool invocations into Spidra API calls and back into text.

    Stateless apart from the client it wraps: no job handles or statuses are
    kept between calls.
    """

    def __init__(self, client: SpidraClient) -> None:
        self.client = client

    async def submit_scrape_job(
        self,
        urls: Sequence[BaseModel | dict[str, Any]],
        prompt: str | None = None,
        output: str | None = None,
        use_proxy: bool | None = None,
    ) -> str:
        """Validate the request, then submit it with a single POST."""
        payload: dict[str, Any] = {"urls": _plain(urls)}
        if prompt is not None:
            payload["prompt"] = prompt
        if output is not None:
            payload["output"] = output
        if use_proxy is not None:
            payload["useProxy"] = use_proxy

        validation = validate_scrape_request(payload)
        if not validation.is_ok:
            logger.info("Rejected scrape request: %s", validation.errors)
            return "Invalid scrape request: " + "; ".join(validation.errors)

        result = await self.client.submit_scrape(validation.request)
        if not result.is_ok:
            return format_failure("submit scrape job", result.error)

        logger.info("Submitted scrape job %s", result.value.job_id)
        return format_job_submitted(result.value)

    async def get_scrape_status(self, job_id: str) -> str:
        """Fetch the current state of a job with a single GET and render it."""
        result = await self.client.get_scrape_status(job_id)
        if not result.is_ok:
            return format_failure("get scrape status", result.error)
        return format_status_report(result.value)


def _plain(urls: Any) -> Any:
    """Turn already-parsed targets back into dicts for one validation pass."""
    if not isinstance(urls, (list, tuple)):
        return urls
    return [
        u.model_dump(by_alias=True, exclude_none=True) if isinstance(u, BaseModel) else u
        for u in urls
    ]
