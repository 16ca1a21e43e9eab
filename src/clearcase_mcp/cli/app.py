"""Main CLI application.

Click commands for clearcase-mcp: serve, tools, call, init.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from clearcase_mcp import __version__
from clearcase_mcp.config.loader import load_config, render_config, user_config_path
from clearcase_mcp.core.errors import ConfigError
from clearcase_mcp.core.logging import configure_logging

if TYPE_CHECKING:
    from clearcase_mcp.config.schema import ClearCaseMcpConfig
    from clearcase_mcp.tools.base import OperationResult


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(ctx: click.Context) -> ClearCaseMcpConfig:
    """Load config with user-friendly error handling and set up logging."""
    try:
        config = load_config(path=ctx.obj["config_path"])
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy
    configure_logging(config.logging, verbose=ctx.obj["verbose"])
    return config


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="clearcase-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """clearcase-mcp - ClearCase tools for AI agents.

    Exposes cleartool operations as MCP tools over stdio.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Start the MCP server on stdio."""
    from clearcase_mcp.mcp.server import run_server

    config = _load_config(ctx)
    asyncio.run(run_server(config))


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON schemas.")
@click.pass_context
def tools(ctx: click.Context, as_json: bool) -> None:
    """List the tools the server exposes."""
    from clearcase_mcp.tools.operations import build_registry

    config = _load_config(ctx)
    registry = build_registry(config)
    definitions = registry.list_definitions()

    if as_json:
        payload = [
            {
                "name": d.name,
                "description": d.description,
                "inputSchema": d.parameters_schema,
            }
            for d in definitions
        ]
        click.echo(json_mod.dumps(payload, indent=2))
        return

    width = max(len(d.name) for d in definitions)
    for d in definitions:
        click.echo(f"{d.name:<{width}}  {d.description}")


# ── call ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("tool_name")
@click.option(
    "--args",
    "args_json",
    default="{}",
    help='Tool arguments as a JSON object, e.g. \'{"resourcePath": "foo.c"}\'.',
)
@click.pass_context
def call(ctx: click.Context, tool_name: str, args_json: str) -> None:
    """Run a single tool and print its result."""
    try:
        arguments = json_mod.loads(args_json)
    except json_mod.JSONDecodeError as e:
        _error(f"--args is not valid JSON: {e}")
    if not isinstance(arguments, dict):
        _error("--args must be a JSON object.")

    config = _load_config(ctx)
    result = asyncio.run(_call_async(config, tool_name, arguments))
    click.echo(result.text)
    if result.is_error:
        sys.exit(1)


async def _call_async(
    config: ClearCaseMcpConfig, tool_name: str, arguments: dict[str, Any]
) -> OperationResult:
    from clearcase_mcp.tools.operations import build_registry

    registry = build_registry(config)
    return await registry.execute(tool_name, arguments)


# ── init ─────────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--path",
    "target",
    type=click.Path(dir_okay=False),
    default=None,
    help="Where to write the config (default: user config path).",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file.")
def init(target: str | None, force: bool) -> None:
    """Interactively write a starter config file."""
    from clearcase_mcp.config.schema import ClearCaseMcpConfig

    path = Path(target) if target else user_config_path()
    if path.exists() and not force:
        _error(f"{path} already exists (use --force to overwrite).")

    click.echo("clearcase-mcp configuration setup")
    executable = click.prompt("Path to cleartool", default="cleartool")
    checkout = click.prompt("Default checkout comment", default="automated checkout")
    checkin = click.prompt("Default checkin comment", default="automated checkin")
    add = click.prompt("Default add comment", default="automated add")
    level = click.prompt(
        "Log level",
        default="INFO",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    )

    config = ClearCaseMcpConfig.model_validate(
        {
            "cleartool": {"executable": executable},
            "comments": {"checkout": checkout, "checkin": checkin, "add": add},
            "logging": {"level": level.upper()},
        }
    )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_config(config), encoding="utf-8")
    except OSError as e:
        _error(f"Cannot write {path}: {e}")
    click.echo(f"Configuration saved to {path}")
    click.echo("Start the server with: clearcase-mcp serve")
