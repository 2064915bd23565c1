from datetime import date, datetime, timedelta

from deckwise.domain.models import (
    CardState,
    ConstantCoefficientState,
    RevisionMode,
    SuperMemo2State,
)
from deckwise.domain.stats.models import DeckStatistics

TODAY = date(2024, 3, 15)


def make_card(is_new=False, regular_days=0, reverse_days=0):
    return CardState(
        id="card_1",
        deck_id="deck_1",
        front="f",
        back="b",
        regular=ConstantCoefficientState(next_revision_date=TODAY + timedelta(days=regular_days)),
        reverse=ConstantCoefficientState(next_revision_date=TODAY + timedelta(days=reverse_days)),
        creation_time=datetime(2024, 3, 1),
        is_new=is_new,
    )


class TestModeStateClamps:
    def test_constant_coefficient_clamps(self):
        state = ConstantCoefficientState(
            next_revision_date=TODAY, base_revision_time=0.0, incorrect_counter=-3
        )
        assert state.base_revision_time == 0.01
        assert state.incorrect_counter == 0

    def test_supermemo2_clamps(self):
        state = SuperMemo2State(
            next_revision_date=TODAY,
            easiness_factor=1.0,
            repetition_count=-1,
            interval_days=0,
            incorrect_counter=-2,
        )
        assert state.easiness_factor == 1.3
        assert state.repetition_count == 0
        assert state.interval_days == 1
        assert state.incorrect_counter == 0


class TestCardState:
    def test_next_dates_per_mode(self):
        card = make_card(regular_days=2, reverse_days=5)
        assert card.next_regular_revision_date == TODAY + timedelta(days=2)
        assert card.next_reverse_revision_date == TODAY + timedelta(days=5)
        assert card.next_revision_date(RevisionMode.REVERSE) == TODAY + timedelta(days=5)

    def test_is_due(self):
        card = make_card(regular_days=-1, reverse_days=1)
        assert card.is_due(RevisionMode.REGULAR, TODAY)
        assert not card.is_due(RevisionMode.REVERSE, TODAY)

    def test_new_cards_are_never_due(self):
        card = make_card(is_new=True)
        assert not card.is_due(RevisionMode.REGULAR, TODAY)

    def test_with_state_returns_copy(self):
        card = make_card()
        new_state = ConstantCoefficientState(next_revision_date=TODAY, base_revision_time=3.0)

        updated = card.with_state(RevisionMode.REVERSE, new_state)

        assert updated.reverse is new_state
        assert updated.regular is card.regular
        assert card.reverse.base_revision_time == 1.0


class TestDeckStatistics:
    def test_windows_have_max_range(self):
        stats = DeckStatistics(deck_id="deck_1", today_indicator=TODAY)
        assert len(stats.revised_for_the_first_time) == 1081
        for mode in RevisionMode:
            assert len(stats.counts_for(mode)) == 1081

    def test_tracked_windows(self):
        stats = DeckStatistics(deck_id="deck_1", today_indicator=TODAY)
        windows = stats.tracked_windows()
        assert len(windows) == 3
        assert windows[0] is stats.revised_for_the_first_time
