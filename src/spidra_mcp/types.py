"""Request and response models for the Spidra scrape API.

Requests are validated before any network I/O. Responses are parsed into the
same models so that rendering works on typed values instead of raw dicts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

ActionType = Literal["click", "type", "scroll", "wait", "select"]
OutputFormat = Literal["json", "markdown"]
JobState = Literal["waiting", "active", "completed", "failed", "delayed"]

# States the remote service has not finished with yet
PENDING_STATES: frozenset[str] = frozenset({"waiting", "active", "delayed"})

MIN_URLS = 1
MAX_URLS = 3

_absolute_url = TypeAdapter(AnyUrl)


class BrowserAction(BaseModel):
    """A browser action performed on the page before it is scraped."""

    type: ActionType = Field(description="The type of browser action")
    selector: str | None = Field(default=None, description="CSS selector for the element")
    value: str | None = Field(default=None, description="Value for type/select actions")
    duration: int | float | None = Field(
        default=None, description="Duration in ms for wait action"
    )


class Cookie(BaseModel):
    """A cookie set in the browser before navigation."""

    name: str
    value: str
    domain: str | None = None


class ScrapeTarget(BaseModel):
    """One URL to scrape, with optional actions and cookies."""

    url: str = Field(description="The URL to scrape", json_schema_extra={"format": "uri"})
    actions: list[BrowserAction] | None = Field(
        default=None, description="Optional browser actions to perform before scraping"
    )
    cookies: list[Cookie] | None = Field(
        default=None, description="Optional cookies to set before scraping"
    )

    @field_validator("url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        # Validate only; the caller's spelling is what gets sent.
        try:
            _absolute_url.validate_python(value)
        except ValidationError as e:
            raise ValueError(f"Invalid url {value!r}") from e
        return value


class ScrapeRequest(BaseModel):
    """Body of POST /scrape."""

    model_config = ConfigDict(populate_by_name=True)

    urls: list[ScrapeTarget] = Field(
        min_length=MIN_URLS,
        max_length=MAX_URLS,
        description="Array of URLs to scrape (1-3 URLs per request)",
    )
    prompt: str | None = Field(
        default=None,
        description="Optional LLM prompt for extracting or transforming the scraped content",
    )
    output: OutputFormat | None = Field(
        default=None, description="Output format for the extracted content"
    )
    use_proxy: bool | None = Field(
        default=None,
        alias="useProxy",
        description="Enable stealth mode with proxy rotation to avoid detection",
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire names, leaving out fields that were not given."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class RequestValidation:
    """Outcome of validating a scrape request.

    Exactly one of request / errors is populated.
    """

    request: ScrapeRequest | None
    errors: list[str] = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        """True if the request passed validation."""
        return self.request is not None


def _format_location(loc: Sequence[int | str]) -> str:
    """Render a pydantic error location as urls[0].actions[1].type."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else part
    return path or "request"


def format_validation_errors(exc: ValidationError) -> list[str]:
    """One "<field>: <message>" line per validation error."""
    return [f"{_format_location(err['loc'])}: {err['msg']}" for err in exc.errors()]


def validate_scrape_request(payload: Mapping[str, Any]) -> RequestValidation:
    """Validate raw tool arguments against the ScrapeRequest shape.

    Never raises for bad input; reasons are returned as "<field>: <message>".
    """
    try:
        request = ScrapeRequest.model_validate(dict(payload))
    except ValidationError as e:
        return RequestValidation(request=None, errors=format_validation_errors(e))
    return RequestValidation(request=request)


class ScrapeJobHandle(BaseModel):
    """Response of POST /scrape."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    job_id: str = Field(alias="jobId")
    status: str
    message: str = ""


class ScrapeProgress(BaseModel):
    message: str = ""
    progress: float


class ScrapeStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    duration_ms: int | float | None = Field(default=None, alias="durationMs")
    captcha_solved_count: int | None = Field(default=None, alias="captchaSolvedCount")
    input_tokens: int | None = Field(default=None, alias="inputTokens")
    output_tokens: int | None = Field(default=None, alias="outputTokens")
    total_tokens: int | None = Field(default=None, alias="totalTokens")


class ScrapeResult(BaseModel):
    """Scraped output: plain text or a structured JSON value."""

    content: Any = None
    screenshots: list[str] | None = None
    stats: ScrapeStats | None = None


class ScrapeStatus(BaseModel):
    """Response of GET /scrape/{jobId}."""

    status: JobState
    progress: ScrapeProgress | None = None
    result: ScrapeResult | None = None
    error: str | None = None

    @property
    def is_pending(self) -> bool:
        """True while the job has neither completed nor failed."""
        return self.status in PENDING_STATES
