"""
Chart data for deck statistics.

Produces (day offset, count) series; drawing them is left to the caller.
History charts run from -(range - 1) up to 0 (today), forecast charts from
0 up to range - 1.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from deckwise.application.deck_service import DeckService
from deckwise.domain.algorithms.registry import algorithm_for_deck
from deckwise.domain.constants import AVAILABLE_RANGES
from deckwise.domain.errors import InvalidSettingError, UnsupportedModeError
from deckwise.domain.models import CardState, Deck, RevisionMode

Series = list[tuple[int, int]]


class ChartKind(str, Enum):
    REVISED_FOR_THE_FIRST_TIME = "revised_for_the_first_time"
    ADDED_NEW = "added_new"
    REVISIONS = "revisions"
    APPEARANCES = "appearances"

    @property
    def per_mode(self) -> bool:
        return self in (ChartKind.REVISIONS, ChartKind.APPEARANCES)


@dataclass(frozen=True)
class ChartDescriptor:
    kind: ChartKind
    mode: RevisionMode | None = None

    @property
    def key(self) -> str:
        if self.mode is None:
            return self.kind.value
        return f"{self.kind.value}.{self.mode.value}"


def validate_range(range_days: int) -> int:
    if range_days not in AVAILABLE_RANGES:
        raise InvalidSettingError(
            f"Range must be one of {', '.join(str(r) for r in AVAILABLE_RANGES)}"
        )
    return range_days


def history_series(counts: list[int], range_days: int) -> Series:
    """Last range_days entries of a "days ago" window, oldest first."""
    return [(-offset, counts[offset]) for offset in range(range_days - 1, -1, -1)]


def added_new_series(cards: Iterable[CardState], range_days: int, today: date) -> Series:
    """Cards created per day over the last range_days days, oldest first."""
    per_day = [0] * range_days
    for card in cards:
        days_ago = (today - card.creation_time.date()).days
        if 0 <= days_ago < range_days:
            per_day[days_ago] += 1
    return history_series(per_day, range_days)


def appearance_series(
    cards: Iterable[CardState], mode: RevisionMode, range_days: int, today: date
) -> Series:
    """
    Non-new cards by days until their next revision in mode.

    Overdue cards count towards day 0; cards due beyond the range are left out.
    """
    per_day = [0] * range_days
    for card in cards:
        if card.is_new:
            continue
        days_until = (card.next_revision_date(mode) - today).days
        if days_until < 0:
            per_day[0] += 1
        elif days_until < range_days:
            per_day[days_until] += 1
    return list(enumerate(per_day))


class ChartService:
    """Builds chart series for a deck from its cards and statistics."""

    def __init__(self, deck_service: DeckService):
        self._decks = deck_service

    def available_charts(self, deck: Deck) -> list[ChartDescriptor]:
        """Mode-independent charts once, then each per-mode chart for every mode."""
        modes = algorithm_for_deck(deck).modes()
        charts = [ChartDescriptor(kind) for kind in ChartKind if not kind.per_mode]
        for kind in ChartKind:
            if kind.per_mode:
                charts.extend(ChartDescriptor(kind, mode) for mode in modes)
        return charts

    def series(
        self,
        deck_id: str,
        kind: ChartKind,
        range_days: int,
        mode: RevisionMode | None = None,
        today: date | None = None,
    ) -> Series:
        """
        Data of one chart.

        Statistics-backed charts are empty when the deck has no statistics row.

        Raises:
            InvalidSettingError: range_days is not an available range.
            UnsupportedModeError: A per-mode chart without a supported mode.
        """
        kind = ChartKind(kind)
        validate_range(range_days)
        deck = self._decks.get_deck(deck_id)
        today = today or self._decks.today()

        if kind.per_mode:
            if mode is None or RevisionMode(mode) not in algorithm_for_deck(deck).modes():
                raise UnsupportedModeError(f"Chart '{kind.value}' needs a supported mode")
            mode = RevisionMode(mode)

        if kind is ChartKind.REVISED_FOR_THE_FIRST_TIME:
            counts = self._decks.statistics.revised_for_the_first_time_counts(deck.id)
            return history_series(counts, range_days) if counts is not None else []
        if kind is ChartKind.REVISIONS:
            counts = self._decks.statistics.revision_counts(deck.id, mode)
            return history_series(counts, range_days) if counts is not None else []
        if kind is ChartKind.ADDED_NEW:
            return added_new_series(self._decks.cards(deck.id), range_days, today)
        return appearance_series(self._decks.cards(deck.id), mode, range_days, today)
