"""
Deck Service: lifecycle of decks and cards.

Creates decks together with their statistics row, adds and removes cards,
moves decks to and from the trash, and is the settings boundary for
algorithm hyperparameters.
"""

import logging
import random
from collections.abc import Callable, Mapping
from datetime import date, datetime

from deckwise.application.id_service import generate_deck_id
from deckwise.application.session import (
    RevisionSession,
    due_cards,
    new_cards_oldest_first,
)
from deckwise.application.stats.service import DeckStatisticsService
from deckwise.domain.algorithms.base import RevisionAlgorithm
from deckwise.domain.algorithms.registry import algorithm_for_deck, create_algorithm
from deckwise.domain.constants import DEFAULT_ALGORITHM, DEFAULT_NEW_CARDS_PER_DAY
from deckwise.domain.errors import (
    CardNotFoundError,
    DeckNotFoundError,
    InvalidCardError,
    InvalidSettingError,
)
from deckwise.domain.interfaces import CardRepository, DeckRepository, RevisionHistoryLog
from deckwise.domain.models import CardState, Deck, RevisionMode

logger = logging.getLogger(__name__)


class DeckService:
    """
    Application service for decks and their cards.

    Depends only on the persistence ports; the factory wires concrete
    adapters.
    """

    def __init__(
        self,
        deck_repo: DeckRepository,
        card_repo: CardRepository,
        history: RevisionHistoryLog,
        statistics: DeckStatisticsService,
        default_algorithm: str = DEFAULT_ALGORITHM,
        default_new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._decks = deck_repo
        self._cards = card_repo
        self._history = history
        self.statistics = statistics
        self.default_algorithm = default_algorithm
        self.default_new_cards_per_day = default_new_cards_per_day
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    # ------------------------------------------------------------------
    # Decks
    # ------------------------------------------------------------------

    def create_deck(
        self,
        name: str,
        algorithm: str | None = None,
        hyperparameters: Mapping[str, object] | None = None,
        new_cards_per_day: int | None = None,
    ) -> Deck:
        """
        Create a deck and its empty statistics.

        Args:
            name: Display name; must not be blank.
            algorithm: Algorithm identifier. Defaults to the configured one.
            hyperparameters: Overrides of the algorithm defaults.
            new_cards_per_day: Daily new-card quota. Defaults to the configured one.

        Raises:
            InvalidSettingError: Blank name or negative quota.
            UnknownAlgorithmError: algorithm is not registered.
            InvalidHyperparameterError: An override failed validation.
        """
        name = name.strip()
        if not name:
            raise InvalidSettingError("Deck name cannot be empty")

        quota = self.default_new_cards_per_day if new_cards_per_day is None else new_cards_per_day
        if quota < 0:
            raise InvalidSettingError("New cards per day cannot be negative")

        revision_algorithm = create_algorithm(algorithm or self.default_algorithm, hyperparameters)
        deck = Deck(
            id=generate_deck_id(),
            name=name,
            algorithm=revision_algorithm.name,
            hyperparameters=revision_algorithm.hyperparameters(),
            created_at=self._clock(),
        )
        self._decks.save_deck(deck)
        self.statistics.create_statistics(deck.id, quota)

        logger.info(f"Created deck '{deck.name}' ({deck.id}) using {deck.algorithm}")
        return deck

    def get_deck(self, deck_id: str) -> Deck:
        deck = self._decks.get_deck(deck_id)
        if deck is None:
            raise DeckNotFoundError(f"Deck not found: {deck_id}")
        return deck

    def find_deck(self, reference: str) -> Deck:
        """
        Look a deck up by id, falling back to an exact name match.

        Raises:
            DeckNotFoundError: Nothing matches, or the name is ambiguous.
        """
        deck = self._decks.get_deck(reference)
        if deck is not None:
            return deck

        matches = [d for d in self._decks.list_decks() if d.name == reference]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise DeckNotFoundError(f"Deck name '{reference}' is ambiguous; use the deck id")
        raise DeckNotFoundError(f"Deck not found: {reference}")

    def list_decks(self, include_deleted: bool = False, only_deleted: bool = False) -> list[Deck]:
        decks = self._decks.list_decks()
        if only_deleted:
            return [d for d in decks if d.is_deleted]
        if include_deleted:
            return decks
        return [d for d in decks if not d.is_deleted]

    def delete_deck(self, deck_id: str) -> Deck:
        """Move a deck to the trash. Its cards and statistics are kept."""
        return self._set_deleted(deck_id, True)

    def restore_deck(self, deck_id: str) -> Deck:
        return self._set_deleted(deck_id, False)

    def _set_deleted(self, deck_id: str, is_deleted: bool) -> Deck:
        deck = self.get_deck(deck_id)
        deck.is_deleted = is_deleted
        self._decks.save_deck(deck)
        logger.info(f"Deck {deck_id} {'moved to trash' if is_deleted else 'restored'}")
        return deck

    def remove_deck(self, deck_id: str) -> int:
        """
        Permanently remove a deck with its cards, their history and its statistics.

        Returns:
            Number of cards removed.
        """
        deck = self.get_deck(deck_id)
        cards = self._cards.load_cards_by_deck(deck.id)
        for card in cards:
            self._history.delete_by_card(card.id)
            self._cards.delete_card(card.id)
        self.statistics.delete_statistics(deck.id)
        self._decks.delete_deck(deck.id)

        logger.info(f"Removed deck {deck.id} with {len(cards)} cards")
        return len(cards)

    # ------------------------------------------------------------------
    # Algorithm settings
    # ------------------------------------------------------------------

    def algorithm_for(self, deck_id: str) -> RevisionAlgorithm:
        return algorithm_for_deck(self.get_deck(deck_id))

    def set_hyperparameter(self, deck_id: str, name: str, value: object) -> int | float:
        """
        Validate and store one hyperparameter of a deck's algorithm.

        The deck is saved only when the value is accepted.

        Returns:
            The converted value.
        """
        deck = self.get_deck(deck_id)
        algorithm = algorithm_for_deck(deck)
        algorithm.set_hyperparameter(name, value)

        deck.hyperparameters = algorithm.hyperparameters()
        self._decks.save_deck(deck)

        accepted = algorithm.get_hyperparameter(name)
        logger.info(f"Deck {deck_id}: {name} set to {accepted}")
        return accepted

    def set_new_cards_per_day(self, deck_id: str, new_cards_per_day: int) -> bool:
        """
        Change the deck's new-card quota.

        Returns:
            False if the deck has no statistics row to hold the quota.
        """
        deck = self.get_deck(deck_id)
        return self.statistics.set_new_cards_per_day(deck.id, new_cards_per_day)

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def add_card(self, deck_id: str, front: str, back: str) -> CardState | None:
        """
        Create a new card in a deck.

        Front and back are stripped of surrounding whitespace.

        Returns:
            The stored card, or None if the deck already holds a card with
            the same front.

        Raises:
            InvalidCardError: front or back is blank.
        """
        deck = self.get_deck(deck_id)
        front, back = _card_text(front, back)
        if self._front_taken(deck.id, front):
            logger.warning(f"Deck {deck.id} already has a card with front '{front}'")
            return None

        card = algorithm_for_deck(deck).create_new_card(
            front, back, deck_id=deck.id, now=self._clock()
        )
        self._cards.save_card(card)
        logger.debug(f"Added card {card.id} to deck {deck.id}")
        return card

    def edit_card(self, card_id: str, front: str, back: str) -> CardState | None:
        """
        Replace the text of a card, keeping its scheduling state.

        Returns:
            The updated card, or None if another card of the deck already
            uses the new front.

        Raises:
            InvalidCardError: front or back is blank.
        """
        card = self.get_card(card_id)
        front, back = _card_text(front, back)
        if self._front_taken(card.deck_id, front, ignore=card.id):
            logger.warning(f"Deck {card.deck_id} already has a card with front '{front}'")
            return None

        card.front = front
        card.back = back
        self._cards.save_card(card)
        logger.info(f"Edited card {card.id}")
        return card

    def search_cards(
        self, deck_id: str, front_phrase: str = "", back_phrase: str = ""
    ) -> list[CardState]:
        """Cards whose front and back contain the given phrases; empty phrases match all."""
        return [
            card
            for card in self.cards(deck_id)
            if front_phrase in card.front and back_phrase in card.back
        ]

    def _front_taken(self, deck_id: str, front: str, ignore: str | None = None) -> bool:
        return any(
            card.front == front and card.id != ignore
            for card in self._cards.load_cards_by_deck(deck_id)
        )

    def get_card(self, card_id: str) -> CardState:
        card = self._cards.get_card(card_id)
        if card is None:
            raise CardNotFoundError(f"Card not found: {card_id}")
        return card

    def cards(self, deck_id: str) -> list[CardState]:
        return self._cards.load_cards_by_deck(self.get_deck(deck_id).id)

    def remove_card(self, card_id: str) -> None:
        """Delete a card together with its revision history."""
        card = self.get_card(card_id)
        self._history.delete_by_card(card.id)
        self._cards.delete_card(card.id)
        logger.info(f"Removed card {card.id} from deck {card.deck_id}")

    # ------------------------------------------------------------------
    # Due and new cards
    # ------------------------------------------------------------------

    def due_cards(self, deck_id: str, mode: RevisionMode) -> list[CardState]:
        """Old cards due today in mode."""
        return due_cards(self.cards(deck_id), RevisionMode(mode), self.today())

    def new_cards_for_today(self, deck_id: str) -> list[CardState]:
        """New cards a session may introduce today, oldest first."""
        cards = self.cards(deck_id)
        total_new = sum(1 for card in cards if card.is_new)
        quota = self.statistics.get_new_cards_for_today(deck_id, total_new)
        return new_cards_oldest_first(cards, quota)

    def due_count(self, deck_id: str, mode: RevisionMode) -> int:
        return len(self.due_cards(deck_id, mode))

    def new_count(self, deck_id: str) -> int:
        return len(self.new_cards_for_today(deck_id))

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_session(
        self,
        deck_id: str,
        mode: RevisionMode,
        rng: random.Random | None = None,
    ) -> RevisionSession:
        deck = self.get_deck(deck_id)
        return RevisionSession(
            deck=deck,
            mode=RevisionMode(mode),
            algorithm=algorithm_for_deck(deck),
            card_repo=self._cards,
            history=self._history,
            statistics=self.statistics,
            rng=rng,
            clock=self.today,
        )


def _card_text(front: str, back: str) -> tuple[str, str]:
    front, back = front.strip(), back.strip()
    if not front or not back:
        raise InvalidCardError("Card front and back cannot be empty")
    return front, back
