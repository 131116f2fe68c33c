"""Tests for the MCP server: tool registration, schemas, and process bootstrap.

Tool calls go through an in-memory fastmcp Client, so the full MCP request
path (argument validation included) is exercised without a subprocess.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from spidra_mcp import ScrapeToolAdapter
from spidra_mcp.mcp_server import create_server, main


@pytest.fixture
def server(adapter: ScrapeToolAdapter):
    return create_server(adapter)


class TestToolRegistration:
    """Tests for the tools the server advertises."""

    @pytest.mark.asyncio
    async def test_registers_both_tools(self, server) -> None:
        async with Client(server) as client:
            tools = await client.list_tools()

        assert {t.name for t in tools} == {"submit_scrape_job", "get_scrape_status"}

    @pytest.mark.asyncio
    async def test_submit_schema(self, server) -> None:
        async with Client(server) as client:
            tools = {t.name: t for t in await client.list_tools()}

        tool = tools["submit_scrape_job"]
        schema = tool.input_schema
        assert set(schema["properties"]) == {"urls", "prompt", "output", "useProxy"}
        assert schema["required"] == ["urls"]
        assert schema["properties"]["urls"]["minItems"] == 1
        assert schema["properties"]["urls"]["maxItems"] == 3
        assert "job ID" in tool.description

    @pytest.mark.asyncio
    async def test_status_schema(self, server) -> None:
        async with Client(server) as client:
            tools = {t.name: t for t in await client.list_tools()}

        tool = tools["get_scrape_status"]
        assert set(tool.input_schema["properties"]) == {"jobId"}
        assert tool.input_schema["required"] == ["jobId"]
        assert "2-5 seconds" in tool.description


class TestToolCalls:
    """Tests for calling the tools over MCP."""

    @pytest.mark.asyncio
    async def test_submit_scrape_job(self, server, spidra_api) -> None:
        spidra_api.respond(200, {"status": "queued", "jobId": "abc123", "message": "ok"})

        async with Client(server) as client:
            result = await client.call_tool(
                "submit_scrape_job",
                {"urls": [{"url": "https://example.com"}], "useProxy": True},
            )

        assert "Job ID: abc123" in result.content[0].text
        assert spidra_api.last_request[1]["json"] == {
            "urls": [{"url": "https://example.com"}],
            "useProxy": True,
        }

    @pytest.mark.asyncio
    async def test_four_urls_rejected_before_network(self, server, spidra_api) -> None:
        urls = [{"url": f"https://example.com/{i}"} for i in range(4)]

        async with Client(server) as client:
            with pytest.raises(ToolError):
                await client.call_tool("submit_scrape_job", {"urls": urls})

        assert spidra_api.sessions == []

    @pytest.mark.asyncio
    async def test_get_scrape_status(self, server, spidra_api) -> None:
        spidra_api.respond(200, {"status": "failed", "error": "timeout"})

        async with Client(server) as client:
            result = await client.call_tool("get_scrape_status", {"jobId": "abc123"})

        assert "Error: timeout" in result.content[0].text

    @pytest.mark.asyncio
    async def test_remote_failure_is_a_normal_result(self, server, spidra_api) -> None:
        spidra_api.respond(500, text="Internal Server Error")

        async with Client(server) as client:
            result = await client.call_tool("get_scrape_status", {"jobId": "abc123"})

        assert not result.is_error
        assert result.content[0].text == (
            "Failed to get scrape status: Spidra API error (500): Internal Server Error"
        )


class TestMain:
    """Tests for process bootstrap."""

    def test_missing_api_key_exits_before_registering_tools(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.delenv("SPIDRA_API_KEY", raising=False)
        monkeypatch.setattr(sys, "argv", ["spidra-mcp"])

        with patch("spidra_mcp.mcp_server.create_server") as mock_create_server:
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert "SPIDRA_API_KEY" in capsys.readouterr().err
        mock_create_server.assert_not_called()

    def test_runs_server_with_configured_adapter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPIDRA_API_KEY", "sk-test")
        monkeypatch.setenv("SPIDRA_API_BASE", "http://localhost:9000/api")
        monkeypatch.delenv("SPIDRA_TIMEOUT", raising=False)
        monkeypatch.setattr(sys, "argv", ["spidra-mcp", "--log-level", "DEBUG"])

        mock_server = MagicMock()
        with patch(
            "spidra_mcp.mcp_server.create_server", return_value=mock_server
        ) as mock_create_server:
            main()

        adapter = mock_create_server.call_args[0][0]
        assert isinstance(adapter, ScrapeToolAdapter)
        assert adapter.client.config.api_key == "sk-test"
        assert adapter.client.base_url == "http://localhost:9000/api"
        mock_server.run.assert_called_once_with()
