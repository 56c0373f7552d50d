"""Configuration management commands for exparse CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from exparse.config import (
    RATE_KEYS,
    get_config_path,
    load_config,
    parse_rate,
    save_config,
)
from exparse.constants import DEFAULT_INPUT_RATE, DEFAULT_OUTPUT_RATE

from ._helpers import SortedGroup, config_option
from ._json_state import echo_error, echo_json, is_json_output

# Sub-app for 'exparse config' subcommands
config_app = typer.Typer(
    help="Manage exparse configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)

# All known config keys: type, description, default
_KNOWN_KEYS: dict[str, dict[str, Any]] = {
    "input_rate": {
        "type": "float",
        "description": "Dollars per million input tokens",
        "default": DEFAULT_INPUT_RATE,
    },
    "output_rate": {
        "type": "float",
        "description": "Dollars per million output tokens",
        "default": DEFAULT_OUTPUT_RATE,
    },
}


def _coerce_value(key: str, value: str) -> Any:
    """Coerce a string value to the appropriate type for a known key."""
    if key not in _KNOWN_KEYS:
        known = ", ".join(_KNOWN_KEYS)
        msg = f"Unknown config key '{key}'. Known keys: {known}"
        raise typer.BadParameter(msg)
    if key in RATE_KEYS:
        try:
            return parse_rate(key, value)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from None
    return value


def _load_for_update(path: Path) -> dict[str, Any]:
    """Load the config before rewriting it, refusing an unreadable file."""
    try:
        return load_config(path, strict=True)
    except ValueError as e:
        echo_error(str(e))
        raise typer.Exit(1) from None


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(..., help="Configuration key to set"),
        value: str = typer.Argument(..., help="Value to set"),
        config: Path | None = config_option(),
    ) -> None:
        """Set a configuration value."""
        coerced = _coerce_value(key, value)
        path = get_config_path(config)
        data = _load_for_update(path)
        data[key] = coerced
        save_config(path, data)
        typer.echo(f"Set {key} = {coerced}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(..., help="Configuration key to read"),
        config: Path | None = config_option(),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Get a configuration value."""
        is_json_output(json_output)  # sync local flag for echo_error
        data = load_config(get_config_path(config))
        if key not in data:
            echo_error(f"Key '{key}' not found in config")
            raise typer.Exit(1)
        val = data[key]
        if is_json_output(json_output):
            echo_json({key: val})
        else:
            typer.echo(val)

    @config_app.command("unset")
    def config_unset(
        key: str = typer.Argument(..., help="Configuration key to remove"),
        config: Path | None = config_option(),
    ) -> None:
        """Remove a configuration value, restoring its default."""
        path = get_config_path(config)
        data = _load_for_update(path)
        if key not in data:
            echo_error(f"Key '{key}' not found in config")
            raise typer.Exit(1)
        del data[key]
        save_config(path, data)
        typer.echo(f"Unset {key}")

    @config_app.command("list")
    def config_list(
        config: Path | None = config_option(),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all configuration values."""
        data = load_config(get_config_path(config))
        if is_json_output(json_output):
            echo_json(data)
        elif not data:
            typer.echo("No configuration values set.")
        else:
            for k, v in sorted(data.items()):
                typer.echo(f"{k} = {v}")

    @config_app.command("keys")
    def config_keys(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all available configuration keys and their descriptions."""
        if is_json_output(json_output):
            echo_json(_KNOWN_KEYS)
            return

        from rich import box
        from rich.console import Console
        from rich.table import Table

        table = Table(
            show_header=True,
            header_style="bold",
            box=box.ROUNDED,
            pad_edge=False,
            show_edge=False,
        )
        table.add_column("Key", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Default", no_wrap=True)
        table.add_column("Description", overflow="fold")

        for key, info in _KNOWN_KEYS.items():
            table.add_row(key, info["type"], str(info["default"]), info["description"])

        Console().print(table)
