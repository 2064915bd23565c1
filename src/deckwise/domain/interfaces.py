"""
Ports for deck, card and revision-history persistence.

The scheduling core treats persistence as a synchronous key-value store.
Errors raised by implementations propagate to the caller; nothing here retries.
"""

from abc import ABC, abstractmethod

from deckwise.domain.models import CardState, Deck, RevisionHistoryEntry


class DeckRepository(ABC):
    @abstractmethod
    def get_deck(self, deck_id: str) -> Deck | None:
        pass

    @abstractmethod
    def save_deck(self, deck: Deck) -> None:
        pass

    @abstractmethod
    def delete_deck(self, deck_id: str) -> None:
        pass

    @abstractmethod
    def list_decks(self) -> list[Deck]:
        pass


class CardRepository(ABC):
    @abstractmethod
    def load_cards_by_deck(self, deck_id: str) -> list[CardState]:
        """
        Fetch every card of a deck.

        Args:
            deck_id: The owning deck.

        Returns:
            Cards in insertion order. Empty if the deck has none.
        """
        pass

    @abstractmethod
    def get_card(self, card_id: str) -> CardState | None:
        pass

    @abstractmethod
    def save_card(self, card: CardState) -> None:
        """Insert or replace a card, keyed by card.id."""
        pass

    @abstractmethod
    def delete_card(self, card_id: str) -> None:
        pass


class RevisionHistoryLog(ABC):
    """
    Append-only sink for answers.

    Entries are never updated; they are only removed in bulk together with
    their card.
    """

    @abstractmethod
    def append(self, entry: RevisionHistoryEntry) -> None:
        pass

    @abstractmethod
    def delete_by_card(self, card_id: str) -> None:
        pass

    @abstractmethod
    def entries_for_card(self, card_id: str) -> list[RevisionHistoryEntry]:
        """Entries of one card, oldest first."""
        pass
