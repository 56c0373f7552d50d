"""Data models for conversations and their replayed costs using dataclasses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from exparse.constants import (
    DEFAULT_INPUT_RATE,
    DEFAULT_OUTPUT_RATE,
    HUMAN_SENDER,
    TOKENS_PER_MTOK,
)


class Role(str, Enum):
    """Billing role of a message sender."""

    HUMAN = "human"
    ASSISTANT = "assistant"


def role_of(sender: str) -> Role:
    """Map a raw sender string to its billing role.

    Only the human sender (case-insensitive) is billed as input. Every other
    value, including ``system`` or unknown senders, is billed as output.
    """
    return Role.HUMAN if sender.lower() == HUMAN_SENDER else Role.ASSISTANT


@dataclass(frozen=True)
class Message:
    """A single chat message as exported."""

    sender: str
    text: str | None = None
    uuid: str | None = None
    created_at: str | None = None

    @property
    def role(self) -> Role:
        """Billing role of this message."""
        return role_of(self.sender)


@dataclass(frozen=True)
class Conversation:
    """A conversation: a display name and its messages in export order."""

    name: str
    messages: tuple[Message, ...] = ()
    uuid: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class PricingConfig:
    """Dollar rates per million tokens for input and output."""

    input_rate: float = DEFAULT_INPUT_RATE
    output_rate: float = DEFAULT_OUTPUT_RATE

    def __post_init__(self) -> None:
        """Reject negative or non-finite rates."""
        for name in ("input_rate", "output_rate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                msg = f"{name} must be a number, got {type(value).__name__}"
                raise ValueError(msg)
            if not math.isfinite(value) or value < 0:
                msg = f"{name} must be a non-negative number, got {value}"
                raise ValueError(msg)

    def input_cost(self, tokens: int) -> float:
        """Dollar cost of ``tokens`` input tokens."""
        return tokens / TOKENS_PER_MTOK * self.input_rate

    def output_cost(self, tokens: int) -> float:
        """Dollar cost of ``tokens`` output tokens."""
        return tokens / TOKENS_PER_MTOK * self.output_rate


@dataclass(frozen=True)
class MessageCost:
    """Breakdown record for one replayed message.

    ``acc_input`` and ``acc_output`` are the running totals after this
    message has been counted.
    """

    role: Role
    msg_tokens: int
    input_cost: int
    output_cost: int
    acc_input: int
    acc_output: int


@dataclass(frozen=True)
class ConversationCost:
    """Replayed cost of a single conversation."""

    number: int
    name: str
    acc_input: int = 0
    acc_output: int = 0
    pricing: PricingConfig = field(default_factory=PricingConfig)
    breakdown: tuple[MessageCost, ...] = ()

    @property
    def input_dollars(self) -> float:
        """Dollar cost of the accumulated input tokens."""
        return self.pricing.input_cost(self.acc_input)

    @property
    def output_dollars(self) -> float:
        """Dollar cost of the accumulated output tokens."""
        return self.pricing.output_cost(self.acc_output)

    @property
    def total_dollars(self) -> float:
        """Total dollar cost of the conversation."""
        return self.input_dollars + self.output_dollars


@dataclass(frozen=True)
class CostTotals:
    """Grand total across a set of conversations."""

    conversations: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    pricing: PricingConfig = field(default_factory=PricingConfig)

    @property
    def input_dollars(self) -> float:
        """Dollar cost of all input tokens."""
        return self.pricing.input_cost(self.input_tokens)

    @property
    def output_dollars(self) -> float:
        """Dollar cost of all output tokens."""
        return self.pricing.output_cost(self.output_tokens)

    @property
    def total_dollars(self) -> float:
        """Overall dollar cost."""
        return self.input_dollars + self.output_dollars


def pricing_to_dict(pricing: PricingConfig) -> dict[str, Any]:
    """Convert pricing to a dictionary for JSON serialization."""
    return {
        "input_rate": pricing.input_rate,
        "output_rate": pricing.output_rate,
    }


def message_cost_to_dict(record: MessageCost) -> dict[str, Any]:
    """Convert a breakdown record to a dictionary for JSON serialization."""
    return {
        "role": record.role.value,
        "msg_tokens": record.msg_tokens,
        "input_cost": record.input_cost,
        "output_cost": record.output_cost,
        "acc_input": record.acc_input,
        "acc_output": record.acc_output,
    }


def conversation_cost_to_dict(
    cost: ConversationCost,
    *,
    include_breakdown: bool = False,
) -> dict[str, Any]:
    """Convert a conversation cost to a dictionary for JSON serialization.

    Args:
        cost: The replayed conversation cost
        include_breakdown: Also include the per-message records

    Returns:
        Dictionary representation
    """
    data: dict[str, Any] = {
        "number": cost.number,
        "name": cost.name,
        "input_tokens": cost.acc_input,
        "output_tokens": cost.acc_output,
        "input_dollars": cost.input_dollars,
        "output_dollars": cost.output_dollars,
        "total_dollars": cost.total_dollars,
    }
    if include_breakdown:
        data["pricing"] = pricing_to_dict(cost.pricing)
        data["messages"] = [message_cost_to_dict(m) for m in cost.breakdown]
    return data


def totals_to_dict(totals: CostTotals) -> dict[str, Any]:
    """Convert grand totals to a dictionary for JSON serialization."""
    return {
        "conversations": totals.conversations,
        "pricing": pricing_to_dict(totals.pricing),
        "input_tokens": totals.input_tokens,
        "output_tokens": totals.output_tokens,
        "input_dollars": totals.input_dollars,
        "output_dollars": totals.output_dollars,
        "total_dollars": totals.total_dollars,
    }
