"""Tests for the interactive CLI loop.

Covers:
- _run_cli_interactive: REPL-like command loop
- EOF handling
- JSON argument parsing
"""

import json
from unittest.mock import patch

import pytest

from tally.adapters.cli.commands import CLICommandHandler
from tally.core.order_service import OrderDraftService
from tally.main import _run_cli_interactive
from tally.tests.fakes import FakeCatalogPort, FakeOrderSinkPort


@pytest.fixture
def handler() -> CLICommandHandler:
    """Handler over a fresh draft."""
    catalog = FakeCatalogPort()
    return CLICommandHandler(OrderDraftService(catalog=catalog, sink=FakeOrderSinkPort()), catalog)


@pytest.mark.asyncio
class TestInteractiveCLILoop:
    """Test suite for interactive CLI loop."""

    async def test_executes_commands_and_prints_json(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ['add {"product_id": "P-2", "quantity": 2}', "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "success"
        assert result["data"]["totals"]["grand_total"] == "60.00"

    async def test_text_output_printed_as_is(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ['totals {"format": "text"}', "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        assert "(no lines)" in capsys.readouterr().out

    async def test_state_carries_between_commands(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ['add {"product_id": "P-1"}', "", "submit", "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        assert '"reference": "TEST-0001"' in capsys.readouterr().out

    async def test_invalid_json_is_skipped(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        commands = ["add not-json", "add [1, 2]", "exit"]

        with patch("builtins.input", side_effect=commands):
            await _run_cli_interactive(handler)

        assert capsys.readouterr().out == ""

    async def test_unknown_command_reports_error(
        self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("builtins.input", side_effect=["refund {}", "exit"]):
            await _run_cli_interactive(handler)

        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "error"
        assert "Unknown command" in result["message"]

    async def test_help(self, handler: CLICommandHandler, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("builtins.input", side_effect=["help", "exit"]):
            await _run_cli_interactive(handler)

        assert "Available Commands" in capsys.readouterr().out

    async def test_eof_exits(self, handler: CLICommandHandler) -> None:
        def input_with_eof(_: str) -> str:
            raise EOFError()

        with patch("builtins.input", side_effect=input_with_eof):
            await _run_cli_interactive(handler)
