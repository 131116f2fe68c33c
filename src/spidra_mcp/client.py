"""HTTP client for the Spidra scrape API.

Every call opens its own aiohttp session and performs exactly one request.
Failures are returned as ApiResult.error instead of being raised, so callers
branch on ``result.is_ok`` rather than wrapping calls in try/except.

Usage:
    client = SpidraClient(SpidraConfig.from_env())
    result = await client.get_scrape_status("abc123")
    if result.is_ok:
        print(result.value.status)
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel, ValidationError

from spidra_mcp.config import SpidraConfig
from spidra_mcp.errors import RemoteAPIError, SpidraError, TransportError
from spidra_mcp.types import (
    ScrapeJobHandle,
    ScrapeRequest,
    ScrapeStatus,
    format_validation_errors,
)

logger = logging.getLogger(__name__)

SCRAPE_ENDPOINT = "/scrape"


@dataclass
class ApiResult:
    """Outcome of one Spidra API call.

    Attributes:
        value: Parsed response (JSON data from request(), a model from the
            endpoint methods). None when the call failed.
        error: RemoteAPIError or TransportError, None on success.
        status_code: HTTP status, None if no response was received.
        body: Raw response text.
    """

    value: Any
    error: SpidraError | None = None
    status_code: int | None = None
    body: str = ""

    @property
    def is_ok(self) -> bool:
        """True if the call succeeded (no error)."""
        return self.error is None


class SpidraClient:
    """Client for the two scrape endpoints of the Spidra API.

    Holds only the immutable configuration, so one instance can serve any
    number of concurrent calls.
    """

    def __init__(self, config: SpidraConfig) -> None:
        self.config = config

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def _session_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": {"x-api-key": self.config.api_key}}
        if self.config.timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=self.config.timeout)
        return kwargs

    async def request(
        self,
        method: str,
        endpoint: str,
        json_body: dict[str, Any] | None = None,
    ) -> ApiResult:
        """Send one request and decode the JSON response.

        Args:
            method: HTTP method.
            endpoint: Path below the base URL, starting with "/".
            json_body: Optional JSON body; sets Content-Type: application/json.

        Returns:
            ApiResult with the decoded JSON as value, or with a RemoteAPIError
            (non-2xx or non-JSON body) / TransportError (no response) as error.
        """
        url = self.config.base_url + endpoint
        request_kwargs: dict[str, Any] = {}
        if json_body is not None:
            request_kwargs["json"] = json_body
            request_kwargs["headers"] = {"Content-Type": "application/json"}

        logger.debug("Spidra request: %s %s", method, endpoint)

        async with aiohttp.ClientSession(**self._session_kwargs()) as session:
            try:
                response = await session.request(method, url, **request_kwargs)
                status = response.status
                raw = await response.read()
                text = _decode_body(response, raw)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning("Spidra request failed: %s %s - %s", method, endpoint, e)
                return ApiResult(value=None, error=TransportError(e))

        if not 200 <= status < 300:
            logger.warning("Spidra API returned HTTP %s for %s %s", status, method, endpoint)
            return ApiResult(
                value=None,
                error=RemoteAPIError(status, text),
                status_code=status,
                body=text,
            )

        try:
            data = json.loads(text)
        except ValueError:
            logger.warning("Spidra API returned non-JSON body for %s %s", method, endpoint)
            return ApiResult(
                value=None,
                error=RemoteAPIError(status, text, detail="Response is not valid JSON"),
                status_code=status,
                body=text,
            )

        return ApiResult(value=data, status_code=status, body=text)

    async def submit_scrape(self, request: ScrapeRequest) -> ApiResult:
        """POST /scrape. On success value is a ScrapeJobHandle."""
        result = await self.request("POST", SCRAPE_ENDPOINT, json_body=request.to_payload())
        return _parse(result, ScrapeJobHandle)

    async def get_scrape_status(self, job_id: str) -> ApiResult:
        """GET /scrape/{jobId}. On success value is a ScrapeStatus.

        Each call fetches fresh state; nothing is cached between polls.
        """
        endpoint = f"{SCRAPE_ENDPOINT}/{quote(job_id, safe='')}"
        result = await self.request("GET", endpoint)
        return _parse(result, ScrapeStatus)


def _decode_body(response: aiohttp.ClientResponse, raw: bytes) -> str:
    """Decode a body in its declared charset, replacing undecodable bytes."""
    try:
        return raw.decode(response.get_encoding(), errors="replace")
    except (LookupError, RuntimeError):
        # Unknown or undetectable charset
        return raw.decode("utf-8", errors="replace")


def _parse(result: ApiResult, model: type[BaseModel]) -> ApiResult:
    """Replace the JSON value of a successful result with a validated model."""
    if not result.is_ok:
        return result

    try:
        value = model.model_validate(result.value)
    except ValidationError as e:
        reasons = "; ".join(format_validation_errors(e))
        logger.warning("Unexpected %s from Spidra API: %s", model.__name__, reasons)
        return ApiResult(
            value=None,
            error=RemoteAPIError(
                result.status_code or 0,
                result.body,
                detail=f"Unexpected response ({reasons})",
            ),
            status_code=result.status_code,
            body=result.body,
        )

    return ApiResult(value=value, status_code=result.status_code, body=result.body)
