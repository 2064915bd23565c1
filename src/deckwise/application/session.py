"""
Revision session for one deck and one mode.

Builds the candidate pools once, when the session starts:
1. Old cards whose next date for the mode has arrived
2. New cards, oldest first, capped at today's remaining quota

Then draws cards uniformly at random from both pools until they are empty.
"""

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from deckwise.application.stats.service import DeckStatisticsService
from deckwise.domain.algorithms.base import RevisionAlgorithm
from deckwise.domain.errors import SessionEndedError
from deckwise.domain.interfaces import CardRepository, RevisionHistoryLog
from deckwise.domain.models import CardState, Deck, RevisionHistoryEntry, RevisionMode

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ACTIVE = "active"  # a current card is presented
    ENDED = "ended"  # both pools are empty


@dataclass
class SessionPools:
    """Cards a session may still present."""

    old_cards: list[CardState]  # Due non-new cards
    new_cards: list[CardState]  # New cards, oldest first

    @property
    def size(self) -> int:
        return len(self.old_cards) + len(self.new_cards)


@dataclass
class AnswerResult:
    """Outcome of one answer within a session."""

    card: CardState  # The card as persisted after the answer
    finished: bool  # Whether the card left the session
    next_card: CardState | None  # None once the session has ended


def due_cards(cards: Iterable[CardState], mode: RevisionMode, today: date) -> list[CardState]:
    """Non-new cards due in mode on or before today."""
    return [card for card in cards if card.is_due(mode, today)]


def new_cards_oldest_first(cards: Iterable[CardState], limit: int) -> list[CardState]:
    """
    New cards ordered by creation time, truncated to limit.

    A negative limit (unknown quota) yields no cards.
    """
    fresh = sorted((card for card in cards if card.is_new), key=lambda c: c.creation_time)
    return fresh[: max(limit, 0)]


def build_pools(
    cards: list[CardState],
    mode: RevisionMode,
    today: date,
    new_card_quota: int,
) -> SessionPools:
    return SessionPools(
        old_cards=due_cards(cards, mode, today),
        new_cards=new_cards_oldest_first(cards, new_card_quota),
    )


def select_card(pools: SessionPools, rng: random.Random) -> tuple[CardState, bool] | None:
    """
    Draw one card uniformly over both pools.

    Returns:
        (card, from_new_pool), or None when both pools are empty.
    """
    total = pools.size
    if total == 0:
        return None

    index = rng.randrange(total)
    if index < len(pools.old_cards):
        return pools.old_cards[index], False
    return pools.new_cards[index - len(pools.old_cards)], True


class RevisionSession:
    """
    Presents cards of one deck in one mode and records every answer.

    Each answer saves the card, appends a history entry and updates the deck
    statistics before the next card is drawn. Cards that are not finished
    stay in their pool with their updated state and may be drawn again.
    """

    def __init__(
        self,
        deck: Deck,
        mode: RevisionMode,
        algorithm: RevisionAlgorithm,
        card_repo: CardRepository,
        history: RevisionHistoryLog,
        statistics: DeckStatisticsService,
        rng: random.Random | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.deck = deck
        self.mode = RevisionMode(mode)
        self._algorithm = algorithm
        self._cards = card_repo
        self._history = history
        self._statistics = statistics
        self._rng = rng or random.Random()
        self._clock = clock

        # Rejects modes the algorithm does not support
        self.button_ids = algorithm.button_ids(self.mode)

        all_cards = self._cards.load_cards_by_deck(deck.id)
        total_new = sum(1 for card in all_cards if card.is_new)
        quota = self._statistics.get_new_cards_for_today(deck.id, total_new)
        self._pools = build_pools(all_cards, self.mode, self._clock(), quota)
        self.answered = 0

        logger.info(
            f"Session started for deck {deck.id} ({self.mode.value}): "
            f"{len(self._pools.old_cards)} due, {len(self._pools.new_cards)} new"
        )

        self._current: CardState | None = None
        self._current_is_new_pool = False
        self._advance()

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._current is not None else SessionState.ENDED

    @property
    def current_card(self) -> CardState | None:
        return self._current

    @property
    def remaining_old(self) -> int:
        return len(self._pools.old_cards)

    @property
    def remaining_new(self) -> int:
        return len(self._pools.new_cards)

    def answer(self, button: int) -> AnswerResult:
        """
        Answer the current card and draw the next one.

        Args:
            button: 1-based answer button for the session's mode.

        Raises:
            SessionEndedError: No card is being presented.
            InvalidButtonError: Button outside the algorithm's set; the
                session is left unchanged.
        """
        card = self._current
        if card is None:
            raise SessionEndedError(f"Session for deck {self.deck.id} has no cards left")

        today = self._clock()
        was_new = card.is_new
        outcome = self._algorithm.answer(card, button, self.mode, today)
        updated = replace(outcome.card, is_new=False)

        self._cards.save_card(updated)
        self._history.append(
            RevisionHistoryEntry(
                card_id=updated.id,
                revision_date=today,
                mode=self.mode,
                pressed_button_index=button,
            )
        )
        if was_new:
            self._statistics.new_card_revised(self.deck.id)

        if outcome.finished:
            self._remove(updated.id)
            self._statistics.card_revised(self.deck.id, self.mode)
        else:
            self._requeue(updated)

        self.answered += 1
        logger.debug(
            f"Card {updated.id} answered with button {button} "
            f"(finished={outcome.finished}, next={updated.next_revision_date(self.mode)})"
        )

        self._advance()
        return AnswerResult(card=updated, finished=outcome.finished, next_card=self._current)

    def _remove(self, card_id: str) -> None:
        self._pools.old_cards = [c for c in self._pools.old_cards if c.id != card_id]
        self._pools.new_cards = [c for c in self._pools.new_cards if c.id != card_id]

    def _requeue(self, card: CardState) -> None:
        pool = self._pools.new_cards if self._current_is_new_pool else self._pools.old_cards
        for i, queued in enumerate(pool):
            if queued.id == card.id:
                pool[i] = card
                return

    def _advance(self) -> None:
        selected = select_card(self._pools, self._rng)
        if selected is None:
            if self.answered:
                logger.info(f"Session for deck {self.deck.id} ended after {self.answered} answers")
            self._current = None
            self._current_is_new_pool = False
            return
        self._current, self._current_is_new_pool = selected
