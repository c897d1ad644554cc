"""
Tests for the probe CLI
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from app.probing import cli
from app.probing.schemas import (
    ConnectivityReport,
    ErrorInfo,
    FunctionalityReport,
    ProbeResult,
    ServerSummary,
)


def _success_result() -> ProbeResult:
    return ProbeResult(
        success=True,
        message="MCP server is reachable",
        connectivity=ConnectivityReport(status=200, status_text="OK"),
        functionality=FunctionalityReport(
            status=200,
            status_text="OK",
            response=ServerSummary(
                status="success",
                message="MCP server is reachable",
                server="example.com",
                version="gpt-4",
                features=["Language Model"],
                raw_response='{"model": "gpt-4"}',
            ),
            is_html=False,
        ),
    )


def test_parse_args():
    args = cli.parse_args(["probe", "https://example.com/mcp", "-k", "tok", "-o", "out.json"])

    assert args.command == "probe"
    assert args.url == "https://example.com/mcp"
    assert args.api_key == "tok"
    assert args.output == "out.json"
    assert args.verbose is False


def test_parse_args_rejects_unknown_command():
    with pytest.raises(SystemExit):
        cli.parse_args(["scan", "https://example.com"])


def test_display_result(capsys):
    cli.display_result(_success_result(), verbose=True)

    out = capsys.readouterr().out
    assert "Success: yes" in out
    assert "Server: example.com" in out
    assert "Features: Language Model" in out
    assert '{"model": "gpt-4"}' in out


def test_display_error_result(capsys):
    result = ProbeResult(
        success=False,
        message="Failed to test server",
        error=ErrorInfo(message="Server error: 502 Bad Gateway"),
        http_status=500,
    )

    cli.display_result(result)

    out = capsys.readouterr().out
    assert "Success: no" in out
    assert "Error: Server error: 502 Bad Gateway" in out


def test_save_result_writes_wire_format(tmp_path):
    output = tmp_path / "result.json"

    cli.save_result(_success_result(), str(output))

    data = json.loads(output.read_text())
    assert data["functionality"]["response"]["_rawResponse"] == '{"model": "gpt-4"}'
    assert data["connectivity"]["statusText"] == "OK"


@pytest.mark.asyncio
async def test_main_exit_codes():
    with patch.object(cli, "probe_command", AsyncMock(return_value=_success_result())):
        assert await cli.main(["probe", "https://example.com"]) == 0

    failed = ProbeResult(success=False, message="Server accessible but returned errors")
    with patch.object(cli, "probe_command", AsyncMock(return_value=failed)):
        assert await cli.main(["probe", "https://example.com"]) == 1
