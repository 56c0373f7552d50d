"""Read commands for exparse CLI: count and list."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from exparse.accounting import cost_conversation, cost_conversations, summarize
from exparse.models import conversation_cost_to_dict, totals_to_dict

from ._formatting import (
    format_conversation_detail,
    format_conversation_line,
    format_totals,
)
from ._helpers import (
    config_option,
    input_cost_option,
    load_conversations,
    output_cost_option,
    resolve_pricing,
    select_conversation,
)
from ._json_state import echo_error, echo_json, is_json_output

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register read commands."""

    @app.command()
    def count(
        file: Path = typer.Argument(..., help="Path to conversations.json"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Show the number of conversations in an export."""
        is_json_output(json_output)  # sync local flag for echo_error
        conversations = load_conversations(file)
        if is_json_output(json_output):
            echo_json({"conversations": len(conversations)})
        else:
            typer.echo(len(conversations))

    @app.command("list")
    def list_conversations(
        file: Path = typer.Argument(..., help="Path to conversations.json"),
        number: int | None = typer.Option(
            None,
            "--number",
            "-n",
            min=1,
            help="Only display conversation N (1-based)",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Show the per-message breakdown for each conversation",
        ),
        tokens: bool = typer.Option(
            False,
            "--tokens",
            "-t",
            help="Show token cost details and the grand total",
        ),
        input_cost: float | None = input_cost_option(),
        output_cost: float | None = output_cost_option(),
        config: Path | None = config_option(),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List conversations with their estimated API cost.

        Each conversation is replayed as if every human turn resent the whole
        history to a pay-per-token API. Costs use dollars per million tokens.

        Examples:
            exparse list conversations.json          # one line per conversation
            exparse list -v conversations.json       # with per-message breakdown
            exparse list -t conversations.json       # breakdown and grand total
            exparse list -n 3 conversations.json     # only conversation 3
            exparse list -t -i 15 -o 75 export.json  # different rates
        """
        try:
            is_json_output(json_output)
            pricing = resolve_pricing(config, input_cost, output_cost)
            conversations = load_conversations(file)
            detailed = verbose or tokens

            if number is not None:
                conversation = select_conversation(conversations, number)
                costs = [cost_conversation(conversation, number, pricing)]
            else:
                costs = cost_conversations(conversations, pricing)

            totals = None
            if tokens and number is None:
                totals = summarize(costs, pricing)
            logger.debug("Replayed %d conversations", len(costs))

            if is_json_output(json_output):
                output: dict[str, object] = {
                    "conversations": [
                        conversation_cost_to_dict(c, include_breakdown=detailed)
                        for c in costs
                    ],
                }
                if totals is not None:
                    output["totals"] = totals_to_dict(totals)
                echo_json(output)
                return

            for cost in costs:
                typer.echo(format_conversation_line(cost))
                if detailed:
                    for line in format_conversation_detail(cost):
                        typer.echo(line)

            if totals is not None:
                typer.echo()
                for line in format_totals(totals):
                    typer.echo(line)

        except typer.Exit:
            raise
        except Exception as e:
            echo_error(str(e))
            raise typer.Exit(1)
