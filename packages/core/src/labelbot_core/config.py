import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "repo": "linode/manager",
    "bot_login": "linode-gh-bot",  # timeline events by this login are never treated as manual overrides
    "branches": {
        "trunk": "master",
        "integration": "develop",
        "staging": "staging",
    },
    "required_approvals": 2,
    "override_policy": "never",  # "never" | "until_relabeled"
    "label_update": "diff",  # "diff" = add/remove calls, "replace" = one set_labels call
}

OVERRIDE_POLICIES = ("never", "until_relabeled")
LABEL_UPDATE_MODES = ("diff", "replace")


class ConfigError(ValueError):
    """Raised when .labelbot.yml contains a value the bot cannot act on."""


def load_config(config_path: str = ".labelbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .labelbot.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "branches": dict(DEFAULT_CONFIG["branches"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping of settings, got {type(file_config).__name__}.")
        branches = file_config.pop("branches", None) or {}
        if not isinstance(branches, dict):
            raise ConfigError(f"branches must be a mapping of role to branch name, got {branches!r}.")
        config.update(file_config)
        config["branches"].update(branches)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["webhook_secret"] = os.environ.get("WEBHOOK_SECRET")

    validate_config(config)
    return config


def validate_config(config: dict) -> None:
    if config["override_policy"] not in OVERRIDE_POLICIES:
        raise ConfigError(
            f"Unknown override_policy: {config['override_policy']!r}. Choose one of {', '.join(OVERRIDE_POLICIES)}."
        )
    if config["label_update"] not in LABEL_UPDATE_MODES:
        raise ConfigError(
            f"Unknown label_update: {config['label_update']!r}. Choose one of {', '.join(LABEL_UPDATE_MODES)}."
        )
    required = config["required_approvals"]
    if isinstance(required, bool) or not isinstance(required, int) or required < 1:
        raise ConfigError(f"required_approvals must be a positive integer, got {required!r}.")
    if "/" not in str(config["repo"]):
        raise ConfigError(f"repo must be in owner/name format, got {config['repo']!r}.")
    for role in ("trunk", "integration", "staging"):
        if not config["branches"].get(role):
            raise ConfigError(f"branches.{role} must be set.")
