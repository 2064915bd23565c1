"""
In-Memory Store: Infrastructure adapter backed by dictionaries.

Implements every persistence port. Values are copied on the way in and out
so callers never share state with the store.
"""

import copy

from deckwise.domain.interfaces import CardRepository, DeckRepository, RevisionHistoryLog
from deckwise.domain.models import CardState, Deck, RevisionHistoryEntry
from deckwise.domain.stats.models import DeckStatistics
from deckwise.domain.stats.ports import StatisticsRepository


class InMemoryStore(DeckRepository, CardRepository, RevisionHistoryLog, StatisticsRepository):
    def __init__(self):
        self.decks: dict[str, Deck] = {}
        self.cards: dict[str, CardState] = {}
        self.statistics: dict[str, DeckStatistics] = {}
        self.history: list[RevisionHistoryEntry] = []

    def _changed(self) -> None:
        """Hook called after every mutation."""

    # Decks

    def get_deck(self, deck_id: str) -> Deck | None:
        deck = self.decks.get(deck_id)
        return copy.deepcopy(deck) if deck is not None else None

    def save_deck(self, deck: Deck) -> None:
        self.decks[deck.id] = copy.deepcopy(deck)
        self._changed()

    def delete_deck(self, deck_id: str) -> None:
        if self.decks.pop(deck_id, None) is not None:
            self._changed()

    def list_decks(self) -> list[Deck]:
        return [copy.deepcopy(deck) for deck in self.decks.values()]

    # Cards

    def load_cards_by_deck(self, deck_id: str) -> list[CardState]:
        return [copy.deepcopy(card) for card in self.cards.values() if card.deck_id == deck_id]

    def get_card(self, card_id: str) -> CardState | None:
        card = self.cards.get(card_id)
        return copy.deepcopy(card) if card is not None else None

    def save_card(self, card: CardState) -> None:
        self.cards[card.id] = copy.deepcopy(card)
        self._changed()

    def delete_card(self, card_id: str) -> None:
        if self.cards.pop(card_id, None) is not None:
            self._changed()

    # Revision history

    def append(self, entry: RevisionHistoryEntry) -> None:
        self.history.append(entry)
        self._changed()

    def delete_by_card(self, card_id: str) -> None:
        kept = [entry for entry in self.history if entry.card_id != card_id]
        if len(kept) != len(self.history):
            self.history = kept
            self._changed()

    def entries_for_card(self, card_id: str) -> list[RevisionHistoryEntry]:
        return [entry for entry in self.history if entry.card_id == card_id]

    # Statistics

    def load_statistics(self, deck_id: str) -> DeckStatistics | None:
        stats = self.statistics.get(deck_id)
        return copy.deepcopy(stats) if stats is not None else None

    def save_statistics(self, statistics: DeckStatistics) -> None:
        self.statistics[statistics.deck_id] = copy.deepcopy(statistics)
        self._changed()

    def delete_statistics(self, deck_id: str) -> None:
        if self.statistics.pop(deck_id, None) is not None:
            self._changed()
