"""Click command line for inspecting configuration and sending test records.

Purpose
-------
Give operators a quick way to check that the environment is complete and that
the configured table accepts rows, without writing a host application.

Contents
--------
* :func:`cli` - root group with ``--traceback`` and ``--use-dotenv`` switches.
* ``info`` / ``config`` / ``send`` subcommands.
* :func:`main` - entry point wrapping :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import asyncio
import os
from typing import Sequence

import click
import lib_cli_exit_tools
from rich.console import Console

from . import __init__conf__
from . import config as config_module
from . import runtime
from .adapters.diagnostics import RichDiagnosticSink
from .domain import DeliveryOutcome, LogLevel

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_LEVEL_CHOICES = [level.severity for level in LogLevel]


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from the nearest .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Forward opted-in log records to a Supabase table."""

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(runtime.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata about the installed package."""

    click.echo(runtime.summary_info(), nl=False)


@cli.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_config() -> None:
    """Show the configuration read from the environment."""

    try:
        resolved = config_module.load_config()
    except config_module.ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    for key, value in resolved.describe().items():
        click.echo(f"{key} = {value if value is not None else '-'}")


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--level", type=click.Choice(_LEVEL_CHOICES), default="info", show_default=True, help="Severity stored in the level column.")
@click.option("--meta", "meta_pairs", multiple=True, metavar="KEY=VALUE", help="Metadata entry; repeat for several keys.")
@click.option("--opt-in/--no-opt-in", default=True, show_default=True, help="Set the opt-in flag on the record.")
def cli_send(message: str, level: str, meta_pairs: tuple[str, ...], opt_in: bool) -> None:
    """Submit one log record through the configured transport."""

    metadata = _parse_meta(meta_pairs)
    try:
        transport = runtime.init(diagnostic=RichDiagnosticSink())
    except config_module.ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        record = {**metadata, "level": level, "message": message, transport.opt_in_key: opt_in}
        result = asyncio.run(transport.submit(record))
    finally:
        runtime.shutdown()

    console = Console()
    if result.outcome is DeliveryOutcome.DELIVERED:
        console.print(f"delivered to table [bold]{result.table}[/bold]")
    elif result.outcome is DeliveryOutcome.SKIPPED:
        console.print(f"skipped: record did not opt in via {transport.opt_in_key!r}")
    else:
        raise click.exceptions.Exit(1)


def _parse_meta(pairs: Sequence[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a mapping.

    Examples
    --------
    >>> _parse_meta(["user=42", "path=/a=b"])
    {'user': '42', 'path': '/a=b'}
    """
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--meta")
        parsed[key.strip()] = value
    return parsed


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit code.

    Tracebacks are restored to their previous setting afterwards so tests and
    embedding hosts are not affected by ``--traceback``.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
