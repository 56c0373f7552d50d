"""Tests for the list command."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from cli_test_helpers import build_export, chat_message, runner, write_export

from exparse.cli import app
from exparse.config import save_config

if TYPE_CHECKING:
    from pathlib import Path

SCENARIO_BREAKDOWN = [
    "  human: msg=12 input=12 output=0 acc-input=12 acc-output=0",
    "  assistant: msg=149 input=0 output=149 acc-input=12 acc-output=149",
    "  human: msg=8 input=169 output=0 acc-input=181 acc-output=149",
    "  assistant: msg=262 input=0 output=262 acc-input=181 acc-output=411",
    "  costs: input=$3/MTok output=$15/MTok input-costs=$0.00 "
    "output-costs=$0.01 total-cost=$0.01",
]


class TestListCommand:
    """Test the plain list output."""

    def test_one_line_per_conversation(self, export_file: Path) -> None:
        """Each conversation gets a numbered line with its cost."""
        result = runner.invoke(app, ["list", str(export_file)])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            '1  "Scenario" $0.01',
            '2  "Empty chat" $0.00',
            '3  "Long answer" $1.50',
        ]

    def test_no_breakdown_by_default(self, export_file: Path) -> None:
        """Without -v or -t only the list lines are printed."""
        result = runner.invoke(app, ["list", str(export_file)])
        assert "acc-input" not in result.stdout
        assert "Total costs" not in result.stdout

    def test_empty_export(self, tmp_path: Path) -> None:
        """An export with no conversations prints nothing."""
        path = write_export(tmp_path / "empty.json", [])
        result = runner.invoke(app, ["list", str(path)])
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_name_with_quotes_is_printed_verbatim(self, tmp_path: Path) -> None:
        """Titles are printed as-is inside the quotes."""
        path = write_export(
            tmp_path / "c.json",
            build_export([('Say "hi" [bold]', [chat_message("human", "hi")])]),
        )
        result = runner.invoke(app, ["list", str(path)])
        assert result.stdout.strip() == '1  "Say "hi" [bold]" $0.00'


class TestListBreakdown:
    """Test -v and -t output."""

    @pytest.mark.parametrize("flag", ["-v", "--verbose", "-t", "--tokens"])
    def test_breakdown_lines(self, export_file: Path, flag: str) -> None:
        """Both flags print the per-message breakdown and cost summary."""
        result = runner.invoke(app, ["list", flag, str(export_file)])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == '1  "Scenario" $0.01'
        assert lines[1:6] == SCENARIO_BREAKDOWN
        assert lines[6] == ""
        assert lines[7] == '2  "Empty chat" $0.00'
        assert lines[8] == (
            "  costs: input=$3/MTok output=$15/MTok input-costs=$0.00 "
            "output-costs=$0.00 total-cost=$0.00"
        )

    def test_verbose_has_no_grand_total(self, export_file: Path) -> None:
        """-v alone does not print the grand total."""
        result = runner.invoke(app, ["list", "-v", str(export_file)])
        assert "Total costs:" not in result.stdout

    def test_tokens_prints_grand_total(self, export_file: Path) -> None:
        """-t ends with the grand total across all conversations."""
        result = runner.invoke(app, ["list", "-t", str(export_file)])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[-9:] == [
            "",
            "Total costs:",
            "  input: $3/MTok",
            "  output: $15/MTok",
            "  input tokens: 186",
            "  input costs: $0.00",
            "  output tokens: 100,411",
            "  output costs: $1.51",
            "  total costs: $1.51",
        ]

    def test_custom_rates(self, export_file: Path) -> None:
        """-i and -o change dollars but not tokens."""
        result = runner.invoke(
            app,
            ["list", "-t", "-i", "1000", "-o", "0.5", str(export_file)],
        )
        assert result.exit_code == 0
        assert '1  "Scenario" $0.18' in result.stdout
        assert "acc-input=181 acc-output=411" in result.stdout
        assert "  input: $1000/MTok" in result.stdout
        assert "  output: $0.5/MTok" in result.stdout
        assert "  input tokens: 186" in result.stdout


class TestListSingleConversation:
    """Test -n selection."""

    def test_select_conversation(self, export_file: Path) -> None:
        """-n prints only the requested conversation."""
        result = runner.invoke(app, ["list", "-n", "3", str(export_file)])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ['3  "Long answer" $1.50']

    def test_select_with_tokens_has_no_grand_total(self, export_file: Path) -> None:
        """-n with -t shows the breakdown but no grand total."""
        result = runner.invoke(app, ["list", "-t", "-n", "1", str(export_file)])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines == ['1  "Scenario" $0.01', *SCENARIO_BREAKDOWN, ""]

    def test_out_of_range(self, export_file: Path) -> None:
        """A number past the end exits with an error."""
        result = runner.invoke(app, ["list", "-n", "4", str(export_file)])
        assert result.exit_code == 1
        assert "Conversation 4 does not exist" in result.output

    def test_must_be_positive(self, export_file: Path) -> None:
        """-n 0 is rejected as a usage error."""
        result = runner.invoke(app, ["list", "-n", "0", str(export_file)])
        assert result.exit_code == 2


class TestListRates:
    """Test where rates come from."""

    def test_negative_rate_rejected(self, export_file: Path) -> None:
        """Negative rates are rejected before any work is done."""
        result = runner.invoke(app, ["list", "--input-cost=-1", str(export_file)])
        assert result.exit_code == 2

    def test_non_numeric_rate_rejected(self, export_file: Path) -> None:
        """Non-numeric rates are rejected."""
        result = runner.invoke(app, ["list", "-o", "cheap", str(export_file)])
        assert result.exit_code == 2

    def test_rates_from_config(self, export_file: Path, isolated_config: Path) -> None:
        """Configured rates are used when no flag is given."""
        save_config(isolated_config, {"input_rate": 15.0, "output_rate": 75.0})
        result = runner.invoke(app, ["list", "-t", "-n", "1", str(export_file)])
        assert "input=$15/MTok output=$75/MTok" in result.stdout

    def test_flag_overrides_config(
        self,
        export_file: Path,
        isolated_config: Path,
    ) -> None:
        """A rate flag overrides the configured value."""
        save_config(isolated_config, {"input_rate": 15.0, "output_rate": 75.0})
        result = runner.invoke(
            app,
            ["list", "-t", "-n", "1", "-o", "20", str(export_file)],
        )
        assert "input=$15/MTok output=$20/MTok" in result.stdout

    def test_explicit_config_path(self, export_file: Path, tmp_path: Path) -> None:
        """--config reads rates from the given file."""
        other = tmp_path / "other.toml"
        save_config(other, {"output_rate": 1.25})
        result = runner.invoke(
            app,
            ["list", "-t", "-n", "1", "--config", str(other), str(export_file)],
        )
        assert "input=$3/MTok output=$1.25/MTok" in result.stdout

    def test_invalid_config_rate(self, export_file: Path, isolated_config: Path) -> None:
        """An invalid configured rate exits with an error naming the key."""
        save_config(isolated_config, {"input_rate": -3.0})
        result = runner.invoke(app, ["list", str(export_file)])
        assert result.exit_code == 1
        assert "input_rate" in result.output


class TestListErrors:
    """Test error reporting for bad exports."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file exits with a read error."""
        result = runner.invoke(app, ["list", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Error: Cannot read" in result.output

    def test_validation_report(self, tmp_path: Path) -> None:
        """Schema errors are listed with path, code and message."""
        message = chat_message("human", "hi")
        del message["sender"]
        path = write_export(tmp_path / "c.json", build_export([("Chat", [message])]))
        result = runner.invoke(app, ["list", str(path)])
        assert result.exit_code == 1
        assert "Validation errors:" in result.output
        assert "Path: 0.chat_messages.0.sender" in result.output
        assert "Code: missing" in result.output
        assert "Message: Field required" in result.output

    def test_validation_report_json(self, tmp_path: Path) -> None:
        """In JSON mode the validation report is a JSON error object."""
        path = write_export(tmp_path / "c.json", [{"name": "x"}])
        result = runner.invoke(app, ["list", "--json", str(path)])
        assert result.exit_code == 1
        error_line = next(
            line for line in result.output.splitlines() if line.startswith("{")
        )
        data = json.loads(error_line)
        assert "failed validation" in data["error"]
        assert {"path": "0.uuid", "code": "missing", "message": "Field required"} in (
            data["issues"]
        )


class TestListJson:
    """Test --json output."""

    def test_json_brief(self, export_file: Path) -> None:
        """Plain --json lists totals without breakdown."""
        result = runner.invoke(app, ["list", "--json", str(export_file)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [c["name"] for c in data["conversations"]] == [
            "Scenario",
            "Empty chat",
            "Long answer",
        ]
        first = data["conversations"][0]
        assert first["input_tokens"] == 181
        assert first["output_tokens"] == 411
        assert first["total_dollars"] == pytest.approx(0.006708)
        assert "messages" not in first
        assert "totals" not in data

    def test_json_tokens(self, export_file: Path) -> None:
        """-t --json includes the breakdown and the grand total."""
        result = runner.invoke(app, ["list", "-t", "--json", str(export_file)])
        data = json.loads(result.stdout)
        messages = data["conversations"][0]["messages"]
        assert [m["role"] for m in messages] == [
            "human",
            "assistant",
            "human",
            "assistant",
        ]
        assert messages[2]["input_cost"] == 169
        assert data["totals"]["input_tokens"] == 186
        assert data["totals"]["output_tokens"] == 100_411
        assert data["totals"]["conversations"] == 3

    def test_global_json_flag(self, export_file: Path) -> None:
        """The global --json flag applies to the list command."""
        result = runner.invoke(app, ["--json", "list", "-n", "2", str(export_file)])
        data = json.loads(result.stdout)
        assert data["conversations"][0]["number"] == 2
