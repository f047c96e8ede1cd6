"""serve command: run the webhook server."""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8080, show_default=True, type=int, help="Port to listen on.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.pass_context
def serve_cmd(ctx, host: str, port: int, log_level: str):
    """Run the webhook endpoint with Flask's built-in server.

    Point the repository's pull_request and pull_request_review webhooks at
    http://HOST:PORT/. For production, serve labelbot_cli.webhook:create_app()
    from a WSGI server instead.

    \b
    Environment variables:
      GITHUB_TOKEN     Token with pull request and issue write access
      WEBHOOK_SECRET   Optional; when set, deliveries must carry a valid signature
    """
    from labelbot_cli.auth import require_github_token
    from labelbot_cli.webhook import create_app

    config = ctx.obj["config"]
    require_github_token(config)

    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    if not config.get("webhook_secret"):
        logging.getLogger(__name__).warning("WEBHOOK_SECRET is not set; deliveries will not be verified.")

    app = create_app(config)
    app.run(host=host, port=port)
