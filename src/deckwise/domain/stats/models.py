"""
Domain models for deck statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date

from deckwise.domain.constants import MAX_RANGE
from deckwise.domain.models import RevisionMode


def empty_window() -> list[int]:
    """A zeroed rolling window, index 0 = today."""
    return [0] * MAX_RANGE


def _empty_revision_counts() -> dict[RevisionMode, list[int]]:
    return {mode: empty_window() for mode in RevisionMode}


@dataclass
class DeckStatistics:
    """
    Rolling per-day counters for a deck.

    Every array holds MAX_RANGE entries indexed by "days ago", relative to
    today_indicator. The arrays are only meaningful after a roll-forward to
    the current day.

    Attributes:
        deck_id: The owning deck.
        today_indicator: Day of the last roll-forward.
        new_cards_per_day: Daily quota of new cards.
        revised_for_the_first_time: Cards that left the new state, per day.
        revision_counts: Finished revisions per day, one window per mode.
    """

    deck_id: str
    today_indicator: date
    new_cards_per_day: int = 0
    revised_for_the_first_time: list[int] = field(default_factory=empty_window)
    revision_counts: dict[RevisionMode, list[int]] = field(
        default_factory=_empty_revision_counts
    )

    def counts_for(self, mode: RevisionMode) -> list[int]:
        return self.revision_counts.setdefault(mode, empty_window())

    def tracked_windows(self) -> list[list[int]]:
        """All windows that roll forward together."""
        return [self.revised_for_the_first_time, *self.revision_counts.values()]
