"""Flask application receiving GitHub pull request webhooks.

The reconciliation runs inside the request so that a GitHub failure is
reported back to the delivery as a 5xx instead of being lost in a
background thread. Deploy with any WSGI server, e.g.

    gunicorn "labelbot_cli.webhook:create_app()"
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from flask import Flask, Response, request
from github import GithubException

from labelbot_core.labeler import run_labeler
from labelbot_core.models import PayloadError, parse_event

logger = logging.getLogger(__name__)

DRAFT_MESSAGE = "Doing nothing because PR is a draft"
SUCCESS_MESSAGE = "Success"


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def verify_signature(body: bytes, secret: str, signature: str | None) -> bool:
    """Check a X-Hub-Signature-256 header against the configured webhook secret."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def create_app(config: dict | None = None) -> Flask:
    """Build the webhook app. Loads .labelbot.yml and the environment when no config is given."""
    if config is None:
        from labelbot_core.config import load_config

        config = load_config()

    app = Flask(__name__)
    app.config["LABELBOT"] = config

    @app.errorhandler(GithubException)
    def github_error(exc: GithubException):
        logger.error("GitHub API call failed with status %s: %s", exc.status, exc.data)
        return _text("GitHub API error", 502)

    @app.route("/", methods=["POST"])
    @app.route("/webhook", methods=["POST"])
    def handle_webhook():
        cfg = app.config["LABELBOT"]

        secret = cfg.get("webhook_secret")
        if secret and not verify_signature(request.get_data(), secret, request.headers.get("X-Hub-Signature-256")):
            logger.warning("Rejected webhook delivery with a bad signature")
            return _text("Invalid signature", 401)

        event_type = request.headers.get("X-GitHub-Event")
        if event_type == "ping":
            return _text("pong")
        if event_type and event_type not in ("pull_request", "pull_request_review"):
            logger.info("Ignoring %s event", event_type)
            return _text(f"Ignoring {event_type} event")

        payload = request.get_json(silent=True)
        try:
            event = parse_event(payload)
        except PayloadError as e:
            logger.warning("Rejected webhook delivery: %s", e)
            return _text(str(e), 400)

        logger.info("Received %s for PR #%d", event.action or "event", event.number)
        result = run_labeler(event, cfg)
        if result is None:
            return _text(DRAFT_MESSAGE)
        return _text(SUCCESS_MESSAGE)

    return app
