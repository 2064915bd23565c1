"""Tests for CLI commands: decks, cards, review, stats, settings, config and humanize_error."""

import json

import pytest
from typer.testing import CliRunner

from deckwise.domain.errors import (
    DeckNotFoundError,
    InvalidHyperparameterError,
    SessionEndedError,
    UnknownAlgorithmError,
)
from deckwise.interface._common import humanize_error
from deckwise.interface.cli import app

runner = CliRunner()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "decks.json"


@pytest.fixture
def cli(data_file):
    def invoke(*args, input=None):
        return runner.invoke(app, ["--data-file", str(data_file), *args], input=input)

    return invoke


@pytest.fixture
def deck_id(cli):
    result = cli("deck", "create", "French")
    assert result.exit_code == 0, result.output
    return result.stdout.strip().splitlines()[-1]


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "deckwise" in result.stdout
    for command in ("deck", "card", "review", "stats", "settings", "config"):
        assert command in result.stdout


def test_algorithms_command(cli):
    result = cli("algorithms")
    assert result.exit_code == 0
    assert "constant_coefficient" in result.stdout
    assert "supermemo2" in result.stdout
    assert "coefficient4 = 1.5" in result.stdout
    assert "reverse buttons: again, excellent" in result.stdout


# --- Decks ---


def test_deck_create_and_list(cli, deck_id, data_file):
    assert deck_id.startswith("deck_")
    assert data_file.exists()

    result = cli("deck", "list", "--json")
    assert result.exit_code == 0
    rows = json.loads(result.stdout)
    assert rows == [
        {
            "id": deck_id,
            "name": "French",
            "algorithm": "constant_coefficient",
            "due": {"regular": 0, "reverse": 0},
            "new": 0,
        }
    ]


def test_deck_create_with_algorithm(cli):
    result = cli("deck", "create", "Spanish", "--algorithm", "supermemo2", "--new-per-day", "5")
    assert result.exit_code == 0
    assert "supermemo2" in result.stdout


def test_deck_create_unknown_algorithm(cli):
    result = cli("deck", "create", "Spanish", "--algorithm", "leitner")
    assert result.exit_code == 1
    assert "Unknown algorithm 'leitner'" in result.output


def test_deck_list_empty(cli):
    result = cli("deck", "list")
    assert result.exit_code == 0
    assert "No decks yet." in result.stdout


def test_deck_trash_cycle(cli, deck_id):
    assert cli("deck", "delete", "French").exit_code == 0
    assert "No decks yet." in cli("deck", "list").stdout
    assert "French" in cli("deck", "list", "--trash").stdout

    assert cli("deck", "restore", deck_id).exit_code == 0
    assert "French" in cli("deck", "list").stdout


def test_deck_remove_requires_confirmation(cli, deck_id):
    result = cli("deck", "remove", "French", input="n\n")
    assert result.exit_code == 1
    assert "French" in cli("deck", "list").stdout

    result = cli("deck", "remove", "French", "--force")
    assert result.exit_code == 0
    assert "Removed 'French' (0 cards)" in result.stdout
    assert "No decks yet." in cli("deck", "list").stdout


def test_unknown_deck(cli):
    result = cli("card", "add", "Klingon", "a", "b")
    assert result.exit_code == 1
    assert "Deck not found: Klingon" in result.output


# --- Cards ---


def test_card_add_list_remove(cli, deck_id):
    result = cli("card", "add", "French", "hund", "dog")
    assert result.exit_code == 0
    card_id = result.stdout.strip()
    assert card_id.startswith("card_")

    listing = cli("card", "list", deck_id).stdout
    assert "hund -> dog  (new)" in listing

    assert cli("card", "remove", card_id).exit_code == 0
    assert "hund" not in cli("card", "list", deck_id).stdout


def test_card_add_duplicate(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")
    result = cli("card", "add", "French", "hund", "hound")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_card_add_blank_text(cli, deck_id):
    result = cli("card", "add", "French", "hund", " ")
    assert result.exit_code == 1
    assert "cannot be empty" in result.output


def test_card_edit(cli, deck_id):
    card_id = cli("card", "add", "French", "hund", "dog").stdout.strip()
    cli("card", "add", "French", "katze", "cat")

    result = cli("card", "edit", card_id, "der Hund", "the dog")
    assert result.exit_code == 0, result.output
    assert "der Hund -> the dog  (new)" in cli("card", "list", deck_id).stdout

    result = cli("card", "edit", card_id, "katze", "cat")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = cli("card", "edit", card_id, "", "dog")
    assert result.exit_code == 1
    assert "cannot be empty" in result.output


def test_card_search(cli, deck_id):
    for front, back in [("hund", "dog"), ("hundert", "hundred"), ("katze", "cat")]:
        cli("card", "add", "French", front, back)

    result = cli("card", "search", "French", "--front", "hund", "--back", "dog")
    assert result.exit_code == 0
    assert "hund -> dog" in result.stdout
    assert "hundert" not in result.stdout

    assert cli("card", "search", "French").stdout.count(" -> ") == 3
    assert "No matching cards." in cli("card", "search", "French", "--back", "bird").stdout


def test_card_remove_unknown(cli):
    result = cli("card", "remove", "card_missing")
    assert result.exit_code == 1
    assert "Card not found" in result.output


# --- Review ---


def test_review_nothing_due(cli, deck_id):
    result = cli("review", "French")
    assert result.exit_code == 0
    assert "Nothing to review today." in result.stdout


def test_review_session(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")

    result = cli("review", "French", "--seed", "1", input="\n3\n")

    assert result.exit_code == 0, result.output
    assert "hund" in result.stdout
    assert "[1] again  [2] weak  [3] good  [4] excellent" in result.stdout
    assert "Answered 1 cards; 0 left today." in result.stdout

    stats = json.loads(cli("stats", "French", "--json").stdout)
    assert stats["revised_for_the_first_time_today"] == 1
    assert stats["modes"]["regular"]["revised_today"] == 1


def test_review_reverse_shows_back_first(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")

    result = cli("review", "French", "--mode", "reverse", input="\n2\n")

    assert result.exit_code == 0, result.output
    assert result.stdout.index("dog") < result.stdout.index("hund")
    assert "[1] again  [2] excellent" in result.stdout


def test_review_rejects_bad_input_and_quits(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")

    result = cli("review", "French", input="\nx\n\n9\n\nq\n")

    assert result.exit_code == 0, result.output
    assert "'x' is not a button." in result.stdout
    assert "Button 9 is not valid in regular mode" in result.stdout
    assert "Answered 0 cards; 1 left today." in result.stdout


def test_review_again_requeues(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")

    result = cli("review", "French", input="\n1\n\n4\n")

    assert result.exit_code == 0, result.output
    assert result.stdout.count("hund") == 2
    assert "Answered 2 cards; 0 left today." in result.stdout


# --- Stats ---


def test_stats_summary(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")
    cli("card", "add", "French", "katze", "cat")

    result = cli("stats", "French")
    assert result.exit_code == 0
    assert "New today: 2 (quota 20, 0 already introduced)" in result.stdout
    assert "regular: 0 due, 0 revised today" in result.stdout


def test_stats_chart(cli, deck_id):
    cli("card", "add", "French", "hund", "dog")

    result = cli("stats", "French", "--chart", "added_new", "--json")
    assert result.exit_code == 0, result.output
    series = json.loads(result.stdout)
    assert len(series) == 31
    assert series[-1] == [0, 1]


def test_stats_chart_bad_range(cli, deck_id):
    result = cli("stats", "French", "--chart", "added_new", "--range", "10")
    assert result.exit_code == 1
    assert "Range must be one of" in result.output


def test_stats_per_mode_chart_needs_mode(cli, deck_id):
    result = cli("stats", "French", "--chart", "revisions")
    assert result.exit_code == 1
    assert "needs a supported mode" in result.output


# --- Settings ---


def test_settings_show(cli, deck_id):
    result = cli("settings", "show", "French")
    assert result.exit_code == 0
    settings = json.loads(result.stdout)
    assert settings["algorithm"] == "constant_coefficient"
    assert settings["new_cards_per_day"] == 20
    assert settings["hyperparameters"]["coefficient1"] == 0.25


def test_settings_set(cli, deck_id):
    result = cli("settings", "set", "French", "coefficient4", "2.25")
    assert result.exit_code == 0
    assert "coefficient4 = 2.25" in result.stdout

    result = cli("settings", "set", "French", "new_cards_per_day", "3")
    assert result.exit_code == 0

    settings = json.loads(cli("settings", "show", "French").stdout)
    assert settings["hyperparameters"]["coefficient4"] == 2.25
    assert settings["new_cards_per_day"] == 3


@pytest.mark.parametrize(
    "name, value, message",
    [
        ("coefficient4", "fast", "Setting rejected"),
        ("coefficient4", "0", "must be at least 0.001"),
        ("coefficient4", "-0.5", "must be at least 0.001"),
        ("grade_bonus", "1", "has no hyperparameter 'grade_bonus'"),
        ("new_cards_per_day", "-1", "cannot be negative"),
        ("new_cards_per_day", "many", "not a whole number"),
    ],
)
def test_settings_set_rejected(cli, deck_id, name, value, message):
    result = cli("settings", "set", "French", name, value)
    assert result.exit_code == 1
    assert message in result.output


def test_settings_set_quota_without_statistics(cli, deck_id, data_file):
    document = json.loads(data_file.read_text(encoding="utf-8"))
    document["statistics"] = {}
    data_file.write_text(json.dumps(document), encoding="utf-8")

    result = cli("settings", "set", "French", "new_cards_per_day", "5")

    assert result.exit_code == 1
    assert "has no statistics" in result.output


# --- Config ---


def test_config_show(cli, data_file):
    result = cli("config", "show")
    assert result.exit_code == 0
    config = json.loads(result.stdout)
    assert config["data_file"] == str(data_file)
    assert config["default_new_cards_per_day"] == 20


def test_config_path(mock_home):
    result = runner.invoke(app, ["config", "path"])
    assert result.exit_code == 0
    assert result.stdout.strip() == str(mock_home / ".config/deckwise/config.toml")


def test_logs_command(cli, mock_home):
    result = cli("logs")
    assert result.exit_code == 0
    assert result.stdout.strip() == str(mock_home / ".config/deckwise/logs/deckwise.log")


def test_env_data_file(monkeypatch, tmp_path):
    monkeypatch.setenv("DECKWISE_DATA_FILE", str(tmp_path / "env.json"))
    result = runner.invoke(app, ["deck", "create", "French"])
    assert result.exit_code == 0
    assert (tmp_path / "env.json").exists()


# --- humanize_error ---


def test_humanize_error():
    assert humanize_error(DeckNotFoundError("Deck not found: x")) == (
        "Deck not found: x (see 'deckwise deck list')"
    )
    assert "deckwise algorithms" in humanize_error(UnknownAlgorithmError("Unknown algorithm"))
    assert humanize_error(InvalidHyperparameterError("coefficient1", -1, "too small")) == (
        "Setting rejected: Invalid value -1 for 'coefficient1': too small"
    )
    assert humanize_error(SessionEndedError()) == "SessionEndedError"
