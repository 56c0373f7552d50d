"""Stateless-API replay of conversations into input and output token costs.

A flat-rate chat app keeps the conversation on the server; a pay-per-token
API does not. Replaying a conversation against the API means every human
turn resends the whole history so far as input, while each assistant turn
is billed only for what it generates. Input cost therefore grows
quadratically with conversation length.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from exparse.models import (
    Conversation,
    ConversationCost,
    CostTotals,
    MessageCost,
    PricingConfig,
    Role,
)
from exparse.tokens import estimate_tokens

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from exparse.models import Message


def accumulate(
    messages: Sequence[Message],
    pricing: PricingConfig | None = None,
    *,
    number: int = 1,
    name: str = "",
) -> ConversationCost:
    """Replay messages in order and accumulate their token costs.

    A human message costs the entire history including itself as input.
    Any other message costs its own tokens as output. Every message grows
    the history regardless of role.

    Args:
        messages: Messages in conversation order
        pricing: Dollar rates per MTok (defaults apply if omitted)
        number: 1-based conversation index, for display
        name: Conversation title, for display

    Returns:
        ConversationCost with totals and the per-message breakdown
    """
    pricing = pricing or PricingConfig()
    running_history = 0
    acc_input = 0
    acc_output = 0
    breakdown: list[MessageCost] = []

    for message in messages:
        msg_tokens = estimate_tokens(message.text)
        new_history = running_history + msg_tokens
        if message.role is Role.HUMAN:
            acc_input += new_history
            record = MessageCost(
                role=Role.HUMAN,
                msg_tokens=msg_tokens,
                input_cost=new_history,
                output_cost=0,
                acc_input=acc_input,
                acc_output=acc_output,
            )
        else:
            acc_output += msg_tokens
            record = MessageCost(
                role=Role.ASSISTANT,
                msg_tokens=msg_tokens,
                input_cost=0,
                output_cost=msg_tokens,
                acc_input=acc_input,
                acc_output=acc_output,
            )
        breakdown.append(record)
        running_history = new_history

    return ConversationCost(
        number=number,
        name=name,
        acc_input=acc_input,
        acc_output=acc_output,
        pricing=pricing,
        breakdown=tuple(breakdown),
    )


def cost_conversation(
    conversation: Conversation,
    number: int,
    pricing: PricingConfig | None = None,
) -> ConversationCost:
    """Replay a single conversation, labelled with its 1-based number."""
    return accumulate(
        conversation.messages,
        pricing,
        number=number,
        name=conversation.name,
    )


def cost_conversations(
    conversations: Sequence[Conversation],
    pricing: PricingConfig | None = None,
) -> list[ConversationCost]:
    """Replay every conversation independently, numbered from 1."""
    return [
        cost_conversation(conversation, number, pricing)
        for number, conversation in enumerate(conversations, start=1)
    ]


def summarize(
    costs: Iterable[ConversationCost],
    pricing: PricingConfig | None = None,
) -> CostTotals:
    """Sum token totals across conversations.

    Dollar amounts are derived from the summed tokens at ``pricing``, so the
    grand total equals the sum of the per-conversation totals. Without
    ``pricing`` the rates the conversations were costed at are used.
    """
    count = 0
    input_tokens = 0
    output_tokens = 0
    for cost in costs:
        if pricing is None:
            pricing = cost.pricing
        count += 1
        input_tokens += cost.acc_input
        output_tokens += cost.acc_output
    return CostTotals(
        conversations=count,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        pricing=pricing or PricingConfig(),
    )
