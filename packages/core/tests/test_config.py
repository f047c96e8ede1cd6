"""Tests for configuration loading."""

import pytest

from labelbot_core.config import ConfigError, load_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["repo"] == "linode/manager"
    assert config["branches"] == {"trunk": "master", "integration": "develop", "staging": "staging"}
    assert config["required_approvals"] == 2
    assert config["override_policy"] == "never"
    assert config["label_update"] == "diff"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".labelbot.yml"
    cfg.write_text("repo: acme/widgets\nrequired_approvals: 1\nlabel_update: replace\n")
    config = load_config(config_path=str(cfg))
    assert config["repo"] == "acme/widgets"
    assert config["required_approvals"] == 1
    assert config["label_update"] == "replace"


def test_partial_branches_merge_with_defaults(tmp_path):
    cfg = tmp_path / ".labelbot.yml"
    cfg.write_text("branches:\n  trunk: main\n")
    config = load_config(config_path=str(cfg))
    assert config["branches"] == {"trunk": "main", "integration": "develop", "staging": "staging"}


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".labelbot.yml"
    cfg.write_text("repo: acme/widgets\n")
    config = load_config(config_path=str(cfg), cli_overrides={"repo": "acme/gadgets"})
    assert config["repo"] == "acme/gadgets"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".labelbot.yml"
    cfg.write_text("repo: acme/widgets\n")
    config = load_config(config_path=str(cfg), cli_overrides={"repo": None})
    assert config["repo"] == "acme/widgets"


def test_env_vars_loaded(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("WEBHOOK_SECRET", "s3cret")
    config = load_config(config_path="nonexistent.yml")
    assert config["github_token"] == "gh-token"
    assert config["webhook_secret"] == "s3cret"


def test_branches_not_shared_reference(tmp_path):
    """Mutating one config's branches must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["branches"]["trunk"] = "main"
    assert config_b["branches"]["trunk"] == "master"


@pytest.mark.parametrize(
    "content",
    [
        "override_policy: sometimes\n",
        "label_update: append\n",
        "required_approvals: 0\n",
        "required_approvals: two\n",
        "repo: manager\n",
        "branches:\n  staging: ''\n",
    ],
)
def test_invalid_values_raise(tmp_path, content):
    cfg = tmp_path / ".labelbot.yml"
    cfg.write_text(content)
    with pytest.raises(ConfigError):
        load_config(config_path=str(cfg))


@pytest.mark.parametrize(
    "content",
    [
        "- repo: acme/widgets\n",
        "just a string\n",
        "branches: main\n",
        "branches:\n  - main\n  - develop\n",
        "repo: [acme/widgets\n",
    ],
)
def test_malformed_config_file_raises(tmp_path, content):
    cfg = tmp_path / ".labelbot.yml"
    cfg.write_text(content)
    with pytest.raises(ConfigError):
        load_config(config_path=str(cfg))
