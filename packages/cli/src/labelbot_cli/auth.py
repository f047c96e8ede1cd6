"""GitHub token lookup for CLI commands.

The webhook server only uses GITHUB_TOKEN, read from the environment by
labelbot_core.config. `labelbot reconcile` is usually run by hand, so it
may also borrow the token of a logged-in GitHub CLI session.
"""

from __future__ import annotations

import logging
import subprocess

import click

logger = logging.getLogger(__name__)


def gh_cli_token() -> str | None:
    """Return the token of the current `gh auth` session, or None."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable: %s", e)
        return None

    token = result.stdout.strip()
    if result.returncode != 0 or not token:
        return None
    logger.debug("Using GitHub token from the gh CLI session.")
    return token


def require_github_token(config: dict, allow_gh_cli: bool = False) -> str:
    """Return the token for API calls, or raise click.UsageError if there is none.

    With ``allow_gh_cli`` a missing GITHUB_TOKEN falls back to `gh auth token`.
    """
    token = config.get("github_token")
    if not token and allow_gh_cli:
        token = gh_cli_token()
    if not token:
        hint = " or run `gh auth login`" if allow_gh_cli else ""
        raise click.UsageError(
            f"No GitHub token found. Set GITHUB_TOKEN{hint} first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return token
