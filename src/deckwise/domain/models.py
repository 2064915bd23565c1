"""
Domain models for decks, cards and revision history.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Literal

from deckwise.domain.constants import (
    DEFAULT_BASE_REVISION_TIME,
    MIN_BASE_REVISION_TIME,
    MIN_EASINESS_FACTOR,
    MIN_INTERVAL_DAYS,
)


class RevisionMode(str, Enum):
    """Direction in which a card is recalled."""

    REGULAR = "regular"  # front -> back
    REVERSE = "reverse"  # back -> front


@dataclass
class ConstantCoefficientState:
    """
    Scheduling state of one mode for the constant-coefficient algorithm.

    Attributes:
        base_revision_time: Multiplicative interval base, in days.
        incorrect_counter: "Again" presses since the last reset.
        next_revision_date: Day on which the card is due in this mode.
    """

    next_revision_date: date
    base_revision_time: float = DEFAULT_BASE_REVISION_TIME
    incorrect_counter: int = 0
    kind: Literal["constant_coefficient"] = "constant_coefficient"

    def __post_init__(self):
        self.base_revision_time = max(self.base_revision_time, MIN_BASE_REVISION_TIME)
        self.incorrect_counter = max(self.incorrect_counter, 0)


@dataclass
class SuperMemo2State:
    """
    Scheduling state of one mode for the SuperMemo-2 algorithm.

    Attributes:
        repetition_count: Consecutive passing answers since the last reset.
        interval_days: Interval assigned by the last passing answer.
        easiness_factor: Multiplier controlling interval growth (>= 1.3).
        incorrect_counter: Failing answers since the last reset.
        next_revision_date: Day on which the card is due in this mode.
    """

    next_revision_date: date
    easiness_factor: float
    repetition_count: int = 0
    interval_days: int = MIN_INTERVAL_DAYS
    incorrect_counter: int = 0
    kind: Literal["supermemo2"] = "supermemo2"

    def __post_init__(self):
        self.repetition_count = max(self.repetition_count, 0)
        self.interval_days = max(self.interval_days, MIN_INTERVAL_DAYS)
        self.easiness_factor = max(self.easiness_factor, MIN_EASINESS_FACTOR)
        self.incorrect_counter = max(self.incorrect_counter, 0)


ModeState = ConstantCoefficientState | SuperMemo2State


@dataclass
class CardState:
    """
    A flashcard together with its scheduling state.

    Regular and reverse mode are tracked independently, but both always hold
    the state type of the algorithm that owns the card's deck.
    """

    id: str
    deck_id: str
    front: str
    back: str
    regular: ModeState
    reverse: ModeState
    creation_time: datetime
    is_new: bool = True

    @property
    def algorithm(self) -> str:
        return self.regular.kind

    @property
    def next_regular_revision_date(self) -> date:
        return self.regular.next_revision_date

    @property
    def next_reverse_revision_date(self) -> date:
        return self.reverse.next_revision_date

    def state_for(self, mode: RevisionMode) -> ModeState:
        return self.regular if mode == RevisionMode.REGULAR else self.reverse

    def next_revision_date(self, mode: RevisionMode) -> date:
        return self.state_for(mode).next_revision_date

    def with_state(self, mode: RevisionMode, state: ModeState) -> "CardState":
        """Return a copy of the card with one mode's state replaced."""
        if mode == RevisionMode.REGULAR:
            return replace(self, regular=state)
        return replace(self, reverse=state)

    def is_due(self, mode: RevisionMode, today: date) -> bool:
        """An old card is due once its next date for the mode has arrived."""
        return not self.is_new and self.next_revision_date(mode) <= today


@dataclass(frozen=True)
class RevisionHistoryEntry:
    """
    A single answer given during a revision session.

    Attributes:
        card_id: The card that was answered.
        revision_date: Day of the answer.
        mode: Mode the card was revised in.
        pressed_button_index: 1-based answer button.
    """

    card_id: str
    revision_date: date
    mode: RevisionMode
    pressed_button_index: int


@dataclass
class Deck:
    """
    A named collection of cards governed by one revision algorithm.

    The algorithm's hyperparameters are stored on the deck so the algorithm
    can be rebuilt from persisted data.
    """

    id: str
    name: str
    algorithm: str
    hyperparameters: dict[str, int | float] = field(default_factory=dict)
    is_deleted: bool = False
    created_at: datetime | None = None
