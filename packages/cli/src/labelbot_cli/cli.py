"""CLI entry point for labelbot.

Commands:
  serve      : run the webhook server that labels PRs as events arrive
  reconcile  : recompute the labels of one PR now (with --shadow to preview)
"""

from __future__ import annotations

import importlib.metadata

import click

from labelbot_cli.commands.reconcile import reconcile_cmd
from labelbot_cli.commands.serve import serve_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("labelbot"),
    prog_name="labelbot",
)
@click.option(
    "--config",
    "config_path",
    default=".labelbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="LABELBOT_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Keep GitHub pull request labels in sync with branches, changesets and reviews."""
    from labelbot_core.config import ConfigError, load_config

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e))

    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = config


main.add_command(serve_cmd)
main.add_command(reconcile_cmd)
