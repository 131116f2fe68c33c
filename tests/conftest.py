"""Test fixtures for spidra-mcp."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from spidra_mcp import ScrapeToolAdapter, SpidraClient, SpidraConfig

TEST_API_KEY = "test-key-123"
TEST_BASE_URL = "https://api.spidra.test/api"


class FakeSpidraAPI:
    """Stand-in for aiohttp.ClientSession that replays queued responses.

    Each opened session consumes one queued response (the last one is reused
    once the queue runs dry). Opening a session with nothing queued fails the
    test, which is how "no network call" is asserted.
    """

    def __init__(self, session_cls: MagicMock) -> None:
        self.session_cls = session_cls
        self.sessions: list[AsyncMock] = []
        self.session_kwargs: list[dict[str, Any]] = []
        self._responses: list[tuple[int, bytes, str, Exception | None]] = []
        session_cls.side_effect = self._open

    def respond(
        self,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
        raw: bytes | None = None,
        charset: str = "utf-8",
    ) -> None:
        if raw is None:
            raw = (text if text is not None else json.dumps(json_body)).encode(charset)
        self._responses.append((status, raw, charset, None))

    def fail(self, exc: Exception) -> None:
        self._responses.append((0, b"", "utf-8", exc))

    def _open(self, *args: Any, **kwargs: Any) -> AsyncMock:
        if not self._responses:
            raise AssertionError("Unexpected HTTP request")
        status, raw, charset, exc = (
            self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        )

        mock_response = AsyncMock()
        mock_response.status = status
        mock_response.read = AsyncMock(return_value=raw)
        mock_response.get_encoding = MagicMock(return_value=charset)

        mock_session = AsyncMock()
        if exc is not None:
            mock_session.request = AsyncMock(side_effect=exc)
        else:
            mock_session.request = AsyncMock(return_value=mock_response)
        mock_session.__aenter__ = AsyncMock(return_value=mock_session)
        mock_session.__aexit__ = AsyncMock(return_value=None)

        self.sessions.append(mock_session)
        self.session_kwargs.append(kwargs)
        return mock_session

    @property
    def request_count(self) -> int:
        return sum(s.request.call_count for s in self.sessions)

    @property
    def last_request(self):
        """call_args of the most recent session.request(...)."""
        return self.sessions[-1].request.call_args


@pytest.fixture
def config() -> SpidraConfig:
    return SpidraConfig(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)


@pytest.fixture
def client(config: SpidraConfig) -> SpidraClient:
    return SpidraClient(config)


@pytest.fixture
def adapter(client: SpidraClient) -> ScrapeToolAdapter:
    return ScrapeToolAdapter(client)


@pytest.fixture
def spidra_api():
    """Patch aiohttp.ClientSession with a FakeSpidraAPI."""
    with patch("aiohttp.ClientSession") as mock_client_session:
        yield FakeSpidraAPI(mock_client_session)
