"""Tests for DeckStatisticsService."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from deckwise.application.stats.service import DeckStatisticsService
from deckwise.domain.errors import InvalidSettingError
from deckwise.domain.models import RevisionMode
from deckwise.domain.stats.models import DeckStatistics
from deckwise.domain.stats.ports import StatisticsRepository


@pytest.fixture
def deck_id(stats_service):
    stats_service.create_statistics("deck_1", new_cards_per_day=10)
    return "deck_1"


def test_create_statistics(stats_service, store, clock, deck_id):
    stored = store.load_statistics(deck_id)
    assert stored.today_indicator == clock.today()
    assert stored.new_cards_per_day == 10
    assert stats_service.revised_for_the_first_time_counts(deck_id) == [0] * 1081


def test_create_rejects_negative_quota(stats_service):
    with pytest.raises(InvalidSettingError):
        stats_service.create_statistics("deck_x", new_cards_per_day=-1)


def test_increments_are_persisted(stats_service, store, deck_id):
    stats_service.new_card_revised(deck_id)
    stats_service.new_card_revised(deck_id)
    stats_service.card_revised(deck_id, RevisionMode.REVERSE)

    stored = store.load_statistics(deck_id)
    assert stored.revised_for_the_first_time[0] == 2
    assert stored.counts_for(RevisionMode.REVERSE)[0] == 1
    assert stored.counts_for(RevisionMode.REGULAR)[0] == 0


def test_new_cards_for_today(stats_service, deck_id):
    assert stats_service.get_new_cards_for_today(deck_id, 30) == 10
    for _ in range(4):
        stats_service.new_card_revised(deck_id)
    assert stats_service.get_new_cards_for_today(deck_id, 30) == 6
    assert stats_service.get_new_cards_for_today(deck_id, 2) == 2


def test_rollover_after_three_days(stats_service, store, clock, deck_id):
    for _ in range(5):
        stats_service.new_card_revised(deck_id)
    stats_service.card_revised(deck_id, RevisionMode.REGULAR)

    clock.advance(3)

    counts = stats_service.revised_for_the_first_time_counts(deck_id)
    assert counts[:4] == [0, 0, 0, 5]
    assert stats_service.revision_counts(deck_id, RevisionMode.REGULAR)[3] == 1
    assert stats_service.get_new_cards_for_today(deck_id, 30) == 10
    assert store.load_statistics(deck_id).today_indicator == clock.today()


def test_increment_after_rollover_lands_on_today(stats_service, clock, deck_id):
    stats_service.card_revised(deck_id, RevisionMode.REGULAR)
    clock.advance(1)
    stats_service.card_revised(deck_id, RevisionMode.REGULAR)

    assert stats_service.revision_counts(deck_id, RevisionMode.REGULAR)[:2] == [1, 1]


def test_readers_return_copies(stats_service, deck_id):
    counts = stats_service.revised_for_the_first_time_counts(deck_id)
    counts[0] = 99
    assert stats_service.revised_for_the_first_time_counts(deck_id)[0] == 0


def test_missing_row_sentinels(stats_service, caplog):
    assert stats_service.get_new_cards_for_today("nope", 5) == -1
    assert stats_service.get_new_cards_per_day("nope") == -1
    assert stats_service.revised_for_the_first_time_counts("nope") is None
    assert stats_service.revision_counts("nope", RevisionMode.REGULAR) is None
    assert "No statistics stored for deck nope" in caplog.text


def test_missing_row_mutators_do_nothing(stats_service, store):
    stats_service.new_card_revised("nope")
    stats_service.card_revised("nope", RevisionMode.REVERSE)
    assert stats_service.set_new_cards_per_day("nope", 5) is False
    assert store.statistics == {}


def test_set_new_cards_per_day(stats_service, deck_id):
    assert stats_service.set_new_cards_per_day(deck_id, 3) is True
    assert stats_service.get_new_cards_per_day(deck_id) == 3
    assert stats_service.get_new_cards_for_today(deck_id, 30) == 3


def test_set_new_cards_per_day_rejects_negative(stats_service, deck_id):
    with pytest.raises(InvalidSettingError):
        stats_service.set_new_cards_per_day(deck_id, -5)
    assert stats_service.get_new_cards_per_day(deck_id) == 10


def test_delete_statistics(stats_service, deck_id):
    stats_service.delete_statistics(deck_id)
    assert stats_service.get_new_cards_for_today(deck_id, 5) == -1


def test_read_saves_only_when_windows_move(clock):
    repo = MagicMock(spec=StatisticsRepository)
    service = DeckStatisticsService(repo, clock=clock.today)
    repo.load_statistics.return_value = DeckStatistics(
        deck_id="deck_1", today_indicator=clock.today()
    )
    service.revision_counts("deck_1", RevisionMode.REGULAR)
    repo.save_statistics.assert_not_called()

    repo.load_statistics.return_value = DeckStatistics(
        deck_id="deck_1", today_indicator=clock.today() - timedelta(days=2)
    )
    service.revision_counts("deck_1", RevisionMode.REGULAR)
    repo.save_statistics.assert_called_once()
