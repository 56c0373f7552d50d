"""Export validation command for exparse CLI."""

from __future__ import annotations

from pathlib import Path

import typer

from ._helpers import load_conversations
from ._json_state import echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register validate command."""

    @app.command()
    def validate(
        file: Path = typer.Argument(..., help="Path to conversations.json"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Check that an export matches the expected format.

        Reports every offending field by path and exits with status 1 when
        the export is invalid.
        """
        is_json_output(json_output)  # sync local flag for echo_error
        conversations = load_conversations(file)
        messages = sum(len(c.messages) for c in conversations)
        if is_json_output(json_output):
            echo_json(
                {
                    "valid": True,
                    "conversations": len(conversations),
                    "messages": messages,
                },
            )
        else:
            typer.echo(f"OK: {len(conversations)} conversations, {messages} messages")
