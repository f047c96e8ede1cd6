"""reconcile command: recompute the labels of a single pull request."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from labelbot_core.gh.pull_request import get_pull, get_repo
from labelbot_core.labeler import run_labeler
from labelbot_core.models import LabelRunResult, PullRequestEvent, PullRequestInfo

console = Console()


def _render_result(result: LabelRunResult) -> Table:
    table = Table(title=f"Labels: {result.repo}#{result.pr_number}", show_header=True, header_style="bold cyan")
    table.add_column("Label", style="bold")
    table.add_column("Condition", width=10)
    table.add_column("Manual removal", width=15)
    table.add_column("Action", width=10)

    for label, wanted in result.conditions.items():
        if label in result.changes.to_add:
            action = "[green]add[/green]"
        elif label in result.changes.to_remove:
            action = "[red]remove[/red]"
        elif label in result.current_labels:
            action = "keep"
        else:
            action = "[dim]-[/dim]"
        table.add_row(
            label,
            "true" if wanted else "false",
            "yes" if result.overrides.get(label) else "",
            action,
        )
    return table


@click.command("reconcile")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Overrides config file.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: show the label changes without applying them.",
)
@click.pass_context
def reconcile_cmd(ctx, pr_number: int, repo: str | None, shadow: bool):
    """Recompute the managed labels of a pull request and apply them.

    Does the same work as a webhook delivery, using the PR's live state.
    """
    from labelbot_cli.auth import require_github_token
    from labelbot_core.config import ConfigError, load_config

    try:
        config = load_config(ctx.obj["config_path"], cli_overrides={"repo": repo})
    except ConfigError as e:
        raise click.UsageError(str(e))

    token = require_github_token(config, allow_gh_cli=True)
    config["github_token"] = token

    this_repo = get_repo(config["repo"], token=token)
    pr = PullRequestInfo.from_github(get_pull(this_repo, pr_number))
    event = PullRequestEvent(action="manual", number=pr_number, pull_request=pr)

    result = run_labeler(event, config, repo_obj=this_repo, shadow=shadow)
    if result is None:
        console.print("[yellow]Skipping draft PR.[/yellow]")
        return

    console.print(_render_result(result))
    if result.changes.is_empty:
        console.print("[green]Labels already up to date.[/green]")
    elif shadow:
        console.print("[bold]Shadow mode: no labels were changed.[/bold]")
    else:
        console.print(
            f"[green]Applied: {len(result.changes.to_add)} added, {len(result.changes.to_remove)} removed.[/green]"
        )
