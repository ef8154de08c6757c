"""Main CLI application.

Click commands for examiner: read, ls, info, search, policy, mcp.
Each file command runs one operation under the configured policy and
exits non-zero when the envelope reports a failure.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

import click

from examiner import __version__
from examiner.config.loader import load_config
from examiner.config.logging import configure_logging
from examiner.core.errors import ConfigError

if TYPE_CHECKING:
    from examiner.config.schema import ExaminerConfig
    from examiner.tools.executor import OperationExecutor
    from examiner.tools.result import OperationResult


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> ExaminerConfig:
    """Load config and logging with user-friendly error handling."""
    try:
        config = load_config(path=config_path)
        configure_logging(config.logging)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy
    return config


def _make_executor(config: ExaminerConfig) -> OperationExecutor:
    """Build the policy and executor, exiting on configuration errors."""
    from examiner.policy.model import build_policy
    from examiner.tools.executor import OperationExecutor

    try:
        return OperationExecutor(build_policy(config.policy))
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _emit(result: OperationResult, as_json: bool, renderer: str) -> None:
    """Print *result* as JSON or via the named display method; exit 1 on failure."""
    from examiner.cli.display import FileDisplay

    if as_json:
        click.echo(result.to_json())
    elif result.success:
        getattr(FileDisplay(), renderer)(result.data)
    else:
        FileDisplay().show_error(result)
    if not result.success:
        sys.exit(1)


json_option = click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the raw result envelope as JSON.",
)


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="examiner")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """examiner - read-only file access for AI models.

    Read, list, inspect and search files under a configurable policy.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── read ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("file_path")
@click.option("--encoding", default="utf8", show_default=True, help="Text encoding.")
@json_option
@click.pass_context
def read(ctx: click.Context, file_path: str, encoding: str, as_json: bool) -> None:
    """Print the contents of FILE_PATH (metadata only for binaries)."""
    config = _load_config(ctx.obj["config_path"])
    result = _make_executor(config).read(file_path, encoding)
    _emit(result, as_json, "show_read")


# ── ls ───────────────────────────────────────────────────────────


@cli.command(name="ls")
@click.argument("dir_path")
@click.option("--all", "-a", "include_hidden", is_flag=True, help="Include hidden entries.")
@json_option
@click.pass_context
def list_directory(
    ctx: click.Context, dir_path: str, include_hidden: bool, as_json: bool
) -> None:
    """List the entries of DIR_PATH."""
    config = _load_config(ctx.obj["config_path"])
    result = _make_executor(config).list(dir_path, include_hidden)
    _emit(result, as_json, "show_listing")


# ── info ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("file_path")
@json_option
@click.pass_context
def info(ctx: click.Context, file_path: str, as_json: bool) -> None:
    """Show metadata for FILE_PATH."""
    config = _load_config(ctx.obj["config_path"])
    result = _make_executor(config).stat(file_path)
    _emit(result, as_json, "show_info")


# ── search ───────────────────────────────────────────────────────


@cli.command()
@click.argument("search_path")
@click.argument("pattern")
@click.option("--recursive", "-r", is_flag=True, help="Descend into subdirectories.")
@json_option
@click.pass_context
def search(
    ctx: click.Context,
    search_path: str,
    pattern: str,
    recursive: bool,
    as_json: bool,
) -> None:
    """Find files under SEARCH_PATH whose name matches PATTERN (* and ?)."""
    config = _load_config(ctx.obj["config_path"])
    result = _make_executor(config).search(search_path, pattern, recursive)
    _emit(result, as_json, "show_search")


# ── policy ───────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def policy(ctx: click.Context) -> None:
    """Show the effective access policy."""
    config = _load_config(ctx.obj["config_path"])
    executor = _make_executor(config)
    from examiner.cli.display import FileDisplay

    FileDisplay().show_policy(executor.policy)


# ── mcp ─────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def mcp(ctx: click.Context) -> None:
    """Start the MCP server for AI agent integration."""
    from examiner.mcp.server import run_server

    config = _load_config(ctx.obj["config_path"])
    _make_executor(config)  # fail fast on a bad policy
    asyncio.run(run_server(config))


def main() -> None:
    cli()
