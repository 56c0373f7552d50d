"""exparse CLI commands for estimating chat export API costs."""

from __future__ import annotations

import typer

from exparse._version import version as _exparse_version
from exparse.log import DEFAULT_LOG_LEVEL, setup_logging

from ._helpers import SortedGroup

app = typer.Typer(
    help="exparse - estimate what a flat-rate chat history would have cost "
    "on a pay-per-token API",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"exparse {_exparse_version}")
        raise typer.Exit(0)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        envvar="EXPARSE_LOG_LEVEL",
    ),
    _version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    from ._json_state import set_json_flag

    set_json_flag(json_output)
    setup_logging(log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import (  # noqa: E402
    _cmd_chart,
    _cmd_config,
    _cmd_read,
    _cmd_validate,
)

for _mod in (
    _cmd_chart,
    _cmd_config,
    _cmd_read,
    _cmd_validate,
):
    _mod.register(app)


def main() -> None:
    """Run the exparse CLI application."""
    app()
