"""Root CLI group for profilectl: global flags, settings, and command registration."""

from __future__ import annotations

from typing import Any

import click

from profilectl import __version__
from profilectl.commands import register_commands
from profilectl.commands._context import AppContext
from profilectl.config.settings import ProfileSettings


def _section_overrides(db_path: str | None, no_plugins: bool) -> dict[str, Any]:
    """Map section-level flags onto partial ``[store]``/``[plugins]`` tables.

    Partial tables merge with the TOML values, so ``--no-plugins`` keeps the
    configured ``local_dir``.
    """
    overrides: dict[str, Any] = {}
    if db_path is not None:
        overrides["store"] = {"path": db_path}
    if no_plugins:
        overrides["plugins"] = {"enabled": False}
    return overrides


@click.group(
    invoke_without_command=True,
    epilog="Config: --config, then $PROFILECTL_CONFIG, then the nearest profilectl.toml.",
)
@click.version_option(version=__version__, prog_name="profilectl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and stage timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--db",
    "db_path",
    default=None,
    metavar="PATH",
    help="SQLite user database (overrides [store] path).",
)
@click.option(
    "--no-plugins",
    is_flag=True,
    help="Skip plugin discovery; only [[fields]] from config are registered.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    db_path: str | None,
    no_plugins: bool,
) -> None:
    """profilectl: user profiles with pluggable additional fields."""
    settings = ProfileSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
        **_section_overrides(db_path, no_plugins),
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
