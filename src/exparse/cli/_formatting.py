"""Display and formatting functions for exparse CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from exparse.constants import COST_COLORS, ROLE_COLORS

if TYPE_CHECKING:
    from exparse.models import ConversationCost, CostTotals, MessageCost


def format_rate(rate: float) -> str:
    """Format a per-MTok rate in its shortest form (``3``, ``2.5``)."""
    if rate == int(rate):
        return str(int(rate))
    return repr(rate)


def format_dollars(amount: float) -> str:
    """Format a dollar amount rounded to cents."""
    return f"${amount:.2f}"


def cost_color(amount: float) -> str:
    """Pick a display color for a conversation total."""
    for threshold, color in COST_COLORS:
        if amount >= threshold:
            return color
    return "white"


def format_conversation_line(cost: ConversationCost) -> str:
    """Format the list line for one conversation.

    Format: ``<number>  "<name>" $<total>``
    """
    total = typer.style(
        format_dollars(cost.total_dollars),
        fg=cost_color(cost.total_dollars),
    )
    return f'{cost.number}  "{cost.name}" {total}'


def format_message_cost(record: MessageCost) -> str:
    """Format one breakdown record, indented under its conversation."""
    role = typer.style(record.role.value, fg=ROLE_COLORS.get(record.role.value))
    return (
        f"  {role}: msg={record.msg_tokens} input={record.input_cost} "
        f"output={record.output_cost} acc-input={record.acc_input} "
        f"acc-output={record.acc_output}"
    )


def format_cost_summary(cost: ConversationCost) -> str:
    """Format the rates and dollar costs of one conversation."""
    pricing = cost.pricing
    return (
        f"  costs: input=${format_rate(pricing.input_rate)}/MTok "
        f"output=${format_rate(pricing.output_rate)}/MTok "
        f"input-costs={format_dollars(cost.input_dollars)} "
        f"output-costs={format_dollars(cost.output_dollars)} "
        f"total-cost={format_dollars(cost.total_dollars)}"
    )


def format_conversation_detail(cost: ConversationCost) -> list[str]:
    """Format the per-message breakdown and cost summary of a conversation."""
    lines = [format_message_cost(record) for record in cost.breakdown]
    lines.append(format_cost_summary(cost))
    lines.append("")
    return lines


def format_totals(totals: CostTotals) -> list[str]:
    """Format the grand total across all conversations.

    Returns:
        Lines of the ``Total costs:`` block
    """
    pricing = totals.pricing
    return [
        "Total costs:",
        f"  input: ${format_rate(pricing.input_rate)}/MTok",
        f"  output: ${format_rate(pricing.output_rate)}/MTok",
        f"  input tokens: {totals.input_tokens:,}",
        f"  input costs: {format_dollars(totals.input_dollars)}",
        f"  output tokens: {totals.output_tokens:,}",
        f"  output costs: {format_dollars(totals.output_dollars)}",
        f"  total costs: {format_dollars(totals.total_dollars)}",
    ]
