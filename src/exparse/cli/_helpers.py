"""Shared infrastructure for exparse CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import typer
from typer.core import TyperGroup

from exparse.config import get_config_path, get_pricing, load_config
from exparse.schema import ExportValidationError, load_export

from ._json_state import echo_error, is_json_output

if TYPE_CHECKING:
    from pathlib import Path

    import click

    from exparse.models import Conversation, PricingConfig


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def report_validation_error(exc: ExportValidationError) -> None:
    """Print a validation failure with one entry per offending field."""
    if is_json_output():
        echo_error(
            str(exc),
            issues=[
                {"path": i.path, "code": i.code, "message": i.message}
                for i in exc.issues
            ],
        )
        return

    typer.echo("Validation errors:", err=True)
    for issue in exc.issues:
        typer.echo(f"\nPath: {issue.path}", err=True)
        typer.echo(f"Code: {issue.code}", err=True)
        typer.echo(f"Message: {issue.message}", err=True)


def load_conversations(file: Path) -> list[Conversation]:
    """Load and validate an export, exiting with status 1 on failure.

    Args:
        file: Path to conversations.json

    Returns:
        Conversations in export order
    """
    try:
        return load_export(file)
    except ExportValidationError as e:
        report_validation_error(e)
        raise typer.Exit(1) from e
    except ValueError as e:
        echo_error(str(e))
        raise typer.Exit(1) from e


def resolve_pricing(
    config_path: Path | None,
    input_cost: float | None,
    output_cost: float | None,
) -> PricingConfig:
    """Build pricing from command-line rates and the config file.

    Exits with status 1 when the config file holds an invalid rate.
    """
    config = load_config(get_config_path(config_path))
    try:
        return get_pricing(config, input_cost, output_cost)
    except ValueError as e:
        echo_error(str(e))
        raise typer.Exit(1) from e


def select_conversation(
    conversations: list[Conversation],
    number: int,
) -> Conversation:
    """Return conversation ``number`` (1-based), exiting if out of range."""
    if number < 1 or number > len(conversations):
        echo_error(f"Conversation {number} does not exist")
        raise typer.Exit(1)
    return conversations[number - 1]


def input_cost_option() -> Any:
    """Build the --input-cost option shared by cost commands."""
    return typer.Option(
        None,
        "--input-cost",
        "-i",
        min=0.0,
        help="Cost per million input tokens (default: 3, or config input_rate)",
    )


def output_cost_option() -> Any:
    """Build the --output-cost option shared by cost commands."""
    return typer.Option(
        None,
        "--output-cost",
        "-o",
        min=0.0,
        help="Cost per million output tokens (default: 15, or config output_rate)",
    )


def config_option() -> Any:
    """Build the --config option shared by commands that read pricing."""
    return typer.Option(
        None,
        "--config",
        help="Path to config.toml (default: $EXPARSE_CONFIG or "
        "~/.config/exparse/config.toml)",
    )
