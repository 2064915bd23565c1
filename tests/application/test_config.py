"""Tests for layered configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from deckwise.application.config import AppConfig, config_file_path, resolve_config


def write_config(home: Path, text: str) -> Path:
    path = home / ".config/deckwise/config.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_defaults(mock_home):
    config = resolve_config()
    assert config.data_file == mock_home / ".config/deckwise/decks.json"
    assert config.log_dir == mock_home / ".config/deckwise/logs"
    assert config.default_algorithm == "constant_coefficient"
    assert config.default_new_cards_per_day == 20
    assert config.verbose == 1


def test_config_file_path(mock_home):
    assert config_file_path() == mock_home / ".config/deckwise/config.toml"


def test_toml_file(mock_home):
    write_config(mock_home, 'default_algorithm = "supermemo2"\ndefault_new_cards_per_day = 5\n')
    config = resolve_config()
    assert config.default_algorithm == "supermemo2"
    assert config.default_new_cards_per_day == 5


def test_env_overrides_toml(mock_home, monkeypatch):
    write_config(mock_home, "default_new_cards_per_day = 5\n")
    monkeypatch.setenv("DECKWISE_DEFAULT_NEW_CARDS_PER_DAY", "9")
    assert resolve_config().default_new_cards_per_day == 9


def test_cli_overrides_env(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("DECKWISE_DATA_FILE", str(tmp_path / "env.json"))
    config = resolve_config({"data_file": tmp_path / "cli.json", "verbose": None})
    assert config.data_file == tmp_path / "cli.json"
    assert config.verbose == 1


def test_user_paths_are_expanded(mock_home):
    config = resolve_config({"data_file": "~/cards.json"})
    assert config.data_file == mock_home / "cards.json"


def test_unknown_algorithm_rejected(mock_home):
    with pytest.raises(ValidationError):
        AppConfig(default_algorithm="leitner")


def test_negative_quota_rejected(mock_home):
    with pytest.raises(ValidationError):
        AppConfig(default_new_cards_per_day=-1)
