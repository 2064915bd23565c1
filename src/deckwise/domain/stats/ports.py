"""
Ports (interfaces) for statistics persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import DeckStatistics


class StatisticsRepository(ABC):
    """
    Port for loading and saving deck statistics.

    Implementations:
        - InMemoryStore: Dictionaries keyed by deck id.
        - JsonFileStore: A single JSON document on disk.
    """

    @abstractmethod
    def load_statistics(self, deck_id: str) -> DeckStatistics | None:
        """
        Fetch the statistics row of a deck.

        Returns:
            The stored DeckStatistics, or None if the deck has no row.
        """

    @abstractmethod
    def save_statistics(self, statistics: DeckStatistics) -> None:
        """Insert or replace the statistics row of statistics.deck_id."""

    @abstractmethod
    def delete_statistics(self, deck_id: str) -> None:
        """Remove the statistics row of a deck, if any."""
