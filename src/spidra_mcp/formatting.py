"""Render Spidra API results as text for the host assistant."""

from __future__ import annotations

import json
import math
from typing import Any

from spidra_mcp.types import ScrapeJobHandle, ScrapeStats, ScrapeStatus

STILL_PROCESSING_HINT = "Job is still processing. Call get_scrape_status again in a few seconds."
DELAYED_HINT = "Job is delayed. Call get_scrape_status again in a few seconds."


def format_job_submitted(handle: ScrapeJobHandle) -> str:
    return (
        "Scrape job submitted successfully!\n\n"
        f"Job ID: {handle.job_id}\n"
        f"Status: {handle.status}\n"
        f"Message: {handle.message}\n\n"
        "Use the get_scrape_status tool with this job ID to check progress "
        "and retrieve results."
    )


def format_percent(fraction: float) -> int:
    """Convert a 0..1 progress fraction to a whole percentage, rounding half up."""
    return math.floor(fraction * 100 + 0.5)


def format_content(content: Any) -> str:
    """Text passes through unchanged; anything else is pretty-printed JSON."""
    if isinstance(content, str):
        return content
    return json.dumps(content, indent=2, ensure_ascii=False)


def _format_stats(stats: ScrapeStats) -> str:
    lines = []
    if stats.duration_ms is not None:
        lines.append(f"Duration: {stats.duration_ms}ms")
    if stats.total_tokens is not None:
        lines.append(f"Tokens used: {stats.total_tokens}")
    return "\n".join(lines)


def format_status_report(status: ScrapeStatus) -> str:
    """Build the multi-line report for one poll of a scrape job.

    Sections, in order: status line, progress, results (completed only),
    error (failed only), and a poll-again hint while the job is pending.
    """
    text = f"Job Status: {status.status}\n"

    if status.progress is not None:
        text += f"Progress: {format_percent(status.progress.progress)}%\n"
        text += f"Message: {status.progress.message}\n"

    result = status.result
    if status.status == "completed" and result is not None:
        text += "\n--- Results ---\n"
        if result.content is not None:
            text += format_content(result.content)

        if result.screenshots:
            text += "\n\nScreenshots:\n" + "\n".join(result.screenshots)

        if result.stats is not None:
            text += "\n\n--- Stats ---\n" + _format_stats(result.stats)

    if status.status == "failed" and status.error:
        text += f"\nError: {status.error}"

    if status.is_pending:
        hint = DELAYED_HINT if status.status == "delayed" else STILL_PROCESSING_HINT
        text += f"\n\n{hint}"

    return text


def format_failure(action: str, error: Exception) -> str:
    """e.g. "Failed to submit scrape job: Spidra API error (401): ..."."""
    return f"Failed to {action}: {error}"
