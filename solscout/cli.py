"""Click CLI entry point for solscout.

All commands are thin orchestration wrappers — business logic lives in
report, scorer, classifier, compare and output modules.

Exit codes:
  0 — success
  1 — any error (invalid address, not a wallet, RPC failure, bad config)

Errors are written to stderr as a JSON object; results go to stdout.
"""

from __future__ import annotations

import asyncio
import json
import shutil
import sys
from pathlib import Path
from typing import Any

import click

from solscout import __version__
from solscout.compare import compare_wallets
from solscout.config import (
    ScoutConfig,
    get_default_config_path,
    load_config,
    save_config,
)
from solscout.exceptions import ScoutError
from solscout.output import format_output
from solscout.report import build_report

# ── Error handler ─────────────────────────────────────────────────────────────


def _output_error(err: ScoutError | Exception) -> None:
    """Write error JSON to stderr and exit."""
    if isinstance(err, ScoutError):
        payload = err.to_dict()
        exit_code = err.exit_code
    else:
        payload = {"error": "unknown_error", "message": str(err), "details": {}}
        exit_code = 1
    sys.stderr.write(json.dumps(payload) + "\n")
    sys.stderr.flush()
    sys.exit(exit_code)


def _resolve_format(ctx: click.Context, as_json: bool) -> str:
    return "json" if as_json else ctx.obj.get("format", "text")


def _use_color(config: ScoutConfig) -> bool:
    """Colour only when enabled and stdout is a terminal."""
    return config.output.color and sys.stdout.isatty()


# ── Root group ────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    envvar="SOLSCOUT_CONFIG",
    default=None,
    help="Config file path (default: ~/.solscout/config.toml)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Output format (overrides config default)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, output_format: str | None) -> None:
    """Solana Scout — agent-first Solana wallet intelligence."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ScoutError:
        # On config errors, use defaults (so config init still works)
        config = ScoutConfig()

    ctx.obj["config"] = config
    ctx.obj["format"] = output_format or config.output.default_format
    ctx.obj["config_path"] = config_path


# ── Analyze command ───────────────────────────────────────────────────────────


@cli.command("analyze")
@click.argument("address")
@click.option("--rpc", "rpc_url", default=None, help="Custom RPC endpoint")
@click.option("--json", "as_json", is_flag=True, help="Output structured JSON (for agent consumption)")
@click.pass_context
def analyze_command(ctx: click.Context, address: str, rpc_url: str | None, as_json: bool) -> None:
    """Profile a single wallet: balance, tokens, activity, risk, type."""
    config: ScoutConfig = ctx.obj["config"]
    fmt = _resolve_format(ctx, as_json)
    endpoint = rpc_url or config.rpc.url

    async def _run() -> None:
        report = await build_report(
            address,
            endpoint,
            timeout=config.rpc.timeout_seconds,
            commitment=config.rpc.commitment,
        )
        click.echo(format_output(report.to_dict(), fmt, color=_use_color(config)))

    try:
        asyncio.run(_run())
    except ScoutError as e:
        _output_error(e)


# ── Compare command ───────────────────────────────────────────────────────────


@cli.command("compare")
@click.argument("address1")
@click.argument("address2")
@click.option("--rpc", "rpc_url", default=None, help="Custom RPC endpoint")
@click.option("--json", "as_json", is_flag=True, help="Output structured JSON (for agent consumption)")
@click.pass_context
def compare_command(
    ctx: click.Context,
    address1: str,
    address2: str,
    rpc_url: str | None,
    as_json: bool,
) -> None:
    """Compare two wallets: shared tokens, activity overlap, similarity score."""
    config: ScoutConfig = ctx.obj["config"]
    fmt = _resolve_format(ctx, as_json)
    endpoint = rpc_url or config.rpc.url

    async def _run() -> None:
        comparison = await compare_wallets(
            address1,
            address2,
            endpoint,
            timeout=config.rpc.timeout_seconds,
            commitment=config.rpc.commitment,
        )
        click.echo(format_output(comparison.to_dict(), fmt, color=_use_color(config)))

    try:
        asyncio.run(_run())
    except ScoutError as e:
        _output_error(e)


# ── Config commands ───────────────────────────────────────────────────────────


@cli.group("config")
def config_group() -> None:
    """Manage solscout configuration."""


@config_group.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing config")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Initialize default config at ~/.solscout/config.toml."""
    provided = ctx.obj.get("config_path")
    config_path = Path(provided) if provided else get_default_config_path()

    if config_path.exists() and not force:
        click.echo(
            json.dumps(
                {
                    "status": "already_exists",
                    "config_path": str(config_path),
                    "hint": "Use --force to reinitialize",
                }
            )
        )
        return

    status = "initialized"
    backup = None

    if config_path.exists() and force:
        backup = str(config_path) + ".bak"
        shutil.copy2(config_path, backup)
        status = "reinitialized"

    save_config(ScoutConfig(), str(config_path))

    result: dict[str, Any] = {
        "status": status,
        "config_path": str(config_path),
    }
    if backup:
        result["backup"] = backup
    click.echo(json.dumps(result))


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    config: ScoutConfig = ctx.obj["config"]
    provided = ctx.obj.get("config_path")
    config_path = Path(provided) if provided else get_default_config_path()

    result = {
        "config_path": str(config_path),
        "rpc": {
            "url": config.rpc.url,
            "timeout_seconds": config.rpc.timeout_seconds,
            "commitment": config.rpc.commitment,
        },
        "output": {
            "default_format": config.output.default_format,
            "color": config.output.color,
        },
    }

    click.echo(format_output(result, "json"))


if __name__ == "__main__":
    cli()
