"""
Deck Statistics Service: Application layer orchestrator.

Loads a deck's statistics, rolls the windows forward to today before every
read or increment, and persists after each mutation.
"""

import logging
from collections.abc import Callable
from datetime import date

from deckwise.domain.errors import InvalidSettingError
from deckwise.domain.models import RevisionMode
from deckwise.domain.stats.models import DeckStatistics
from deckwise.domain.stats.ports import StatisticsRepository

from .rolling import new_cards_available_today, roll_forward

logger = logging.getLogger(__name__)

MISSING_COUNT = -1


class DeckStatisticsService:
    """
    Application service for per-deck rolling counters.

    Follows Dependency Inversion: depends on StatisticsRepository abstraction,
    not concrete adapter implementations.

    A deck without a stored statistics row is tolerated: counts come back as
    -1, windows as None, and increments are skipped.
    """

    def __init__(
        self,
        stats_repo: StatisticsRepository,
        clock: Callable[[], date] = date.today,
    ):
        """
        Args:
            stats_repo: The repository (port) for statistics rows.
            clock: Source of "today"; injectable for tests.
        """
        self._repo = stats_repo
        self._clock = clock

    def create_statistics(self, deck_id: str, new_cards_per_day: int) -> DeckStatistics:
        """Create and persist an empty statistics row for a new deck."""
        if new_cards_per_day < 0:
            raise InvalidSettingError("New cards per day cannot be negative")
        stats = DeckStatistics(
            deck_id=deck_id,
            today_indicator=self._clock(),
            new_cards_per_day=new_cards_per_day,
        )
        self._repo.save_statistics(stats)
        return stats

    def delete_statistics(self, deck_id: str) -> None:
        self._repo.delete_statistics(deck_id)

    def load(self, deck_id: str) -> DeckStatistics | None:
        """
        Fetch a deck's statistics, rolled forward to today.

        The rolled row is saved back only when the windows actually moved.
        """
        stats = self._repo.load_statistics(deck_id)
        if stats is None:
            logger.warning(f"No statistics stored for deck {deck_id}")
            return None

        if roll_forward(stats, self._clock()):
            logger.debug(f"Rolled statistics of deck {deck_id} forward to {stats.today_indicator}")
            self._repo.save_statistics(stats)
        return stats

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def get_new_cards_for_today(self, deck_id: str, total_new_cards: int) -> int:
        """
        Number of new cards that may still be introduced today.

        Returns:
            The remaining quota, or -1 if the deck has no statistics.
        """
        stats = self.load(deck_id)
        if stats is None:
            return MISSING_COUNT
        return new_cards_available_today(stats, total_new_cards)

    def get_new_cards_per_day(self, deck_id: str) -> int:
        stats = self.load(deck_id)
        if stats is None:
            return MISSING_COUNT
        return stats.new_cards_per_day

    def revised_for_the_first_time_counts(self, deck_id: str) -> list[int] | None:
        """Cards that left the new state, indexed by days ago."""
        stats = self.load(deck_id)
        if stats is None:
            return None
        return list(stats.revised_for_the_first_time)

    def revision_counts(self, deck_id: str, mode: RevisionMode) -> list[int] | None:
        """Finished revisions in one mode, indexed by days ago."""
        stats = self.load(deck_id)
        if stats is None:
            return None
        return list(stats.counts_for(RevisionMode(mode)))

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def new_card_revised(self, deck_id: str) -> None:
        """Count a card leaving the new state today."""
        stats = self.load(deck_id)
        if stats is None:
            return
        stats.revised_for_the_first_time[0] += 1
        self._repo.save_statistics(stats)

    def card_revised(self, deck_id: str, mode: RevisionMode) -> None:
        """Count a finished revision in one mode today."""
        stats = self.load(deck_id)
        if stats is None:
            return
        stats.counts_for(RevisionMode(mode))[0] += 1
        self._repo.save_statistics(stats)

    def set_new_cards_per_day(self, deck_id: str, new_cards_per_day: int) -> bool:
        """
        Change the daily new-card quota.

        Returns:
            False if the deck has no statistics row.

        Raises:
            InvalidSettingError: Negative quota.
        """
        if new_cards_per_day < 0:
            raise InvalidSettingError("New cards per day cannot be negative")
        stats = self.load(deck_id)
        if stats is None:
            return False
        stats.new_cards_per_day = new_cards_per_day
        self._repo.save_statistics(stats)
        logger.info(f"Deck {deck_id}: new cards per day set to {new_cards_per_day}")
        return True
