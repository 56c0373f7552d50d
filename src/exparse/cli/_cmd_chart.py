"""Most-expensive-conversations chart command for exparse CLI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.text import Text

from exparse.accounting import cost_conversations, summarize
from exparse.constants import DEFAULT_CHART_TOP

from ._formatting import cost_color, format_dollars, format_rate
from ._helpers import (
    config_option,
    input_cost_option,
    load_conversations,
    output_cost_option,
    resolve_pricing,
)
from ._json_state import echo_error, echo_json, is_json_output

if TYPE_CHECKING:
    from exparse.models import ConversationCost

BLOCK = "\u2588"  # █

# Longest conversation title shown before truncation
_MAX_LABEL = 40


def _label(cost: ConversationCost) -> str:
    """Build the row label: number and (truncated) title."""
    label = f"{cost.number}. {cost.name}"
    if len(label) > _MAX_LABEL:
        label = label[: _MAX_LABEL - 1] + "…"
    return label


def _render_chart(
    costs: list[ConversationCost],
    grand_total: float,
    title: str,
    *,
    console: Console | None = None,
) -> None:
    """Render a horizontal bar chart of conversation costs."""
    console = console or Console()

    if not costs:
        typer.echo(f"{title}: no conversations")
        return

    max_cost = max(c.total_dollars for c in costs)
    labels = [_label(c) for c in costs]
    amounts = [format_dollars(c.total_dollars) for c in costs]
    max_label = max(len(label) for label in labels)
    max_amount = max(len(amount) for amount in amounts)
    # Leave room for: label + gap(2) + amount + gap(1) + bar + gap(1) + pct
    bar_budget = console.width - max_label - 2 - max_amount - 1 - 1 - 5
    bar_width = max(10, min(bar_budget, 40))

    console.print(Text(title, style="bold"))

    for cost, label, amount in zip(costs, labels, amounts):
        color = cost_color(cost.total_dollars)
        filled = round(cost.total_dollars / max_cost * bar_width) if max_cost else 0
        pct = cost.total_dollars / grand_total * 100 if grand_total else 0.0

        row = Text()
        row.append(f"{label:<{max_label}}", style=color)
        row.append(f"  {amount:>{max_amount}} ", style="bold")
        row.append(BLOCK * max(1, filled), style=color)
        row.append(f" {pct:.0f}%", style="dim")
        console.print(row)

    console.print()


def register(app: typer.Typer) -> None:
    """Register chart command."""

    @app.command()
    def chart(
        file: Path = typer.Argument(..., help="Path to conversations.json"),
        top: int = typer.Option(
            DEFAULT_CHART_TOP,
            "--top",
            "-k",
            min=1,
            help="Number of conversations to show",
        ),
        input_cost: float | None = input_cost_option(),
        output_cost: float | None = output_cost_option(),
        config: Path | None = config_option(),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Show the most expensive conversations as a bar chart.

        Conversations are ranked by their replayed API cost. Ties keep
        export order.

        Examples:
            exparse chart conversations.json           # top 10
            exparse chart --top 25 conversations.json  # top 25
        """
        try:
            is_json_output(json_output)
            pricing = resolve_pricing(config, input_cost, output_cost)
            conversations = load_conversations(file)
            costs = cost_conversations(conversations, pricing)
            totals = summarize(costs, pricing)
            ranked = sorted(costs, key=lambda c: -c.total_dollars)[:top]

            if is_json_output(json_output):
                echo_json(
                    {
                        "top": top,
                        "total_dollars": totals.total_dollars,
                        "conversations": [
                            {
                                "number": c.number,
                                "name": c.name,
                                "total_dollars": c.total_dollars,
                            }
                            for c in ranked
                        ],
                    },
                )
                return

            title = (
                f"Top {len(ranked)} of {totals.conversations} conversations "
                f"(input ${format_rate(pricing.input_rate)}/MTok, "
                f"output ${format_rate(pricing.output_rate)}/MTok, "
                f"total {format_dollars(totals.total_dollars)})"
            )
            if not ranked:
                title = "Conversation costs"
            _render_chart(ranked, totals.total_dollars, title)

        except typer.Exit:
            raise
        except Exception as e:
            echo_error(str(e))
            raise typer.Exit(1)
