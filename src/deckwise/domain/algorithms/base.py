"""
Strategy interface shared by all revision algorithms.

An algorithm is a pure numeric policy: given a card and the answer button
pressed in one mode, it returns an updated copy of the card and whether the
card is done for the current session. Hyperparameters are declared in a
static, ordered table of descriptors rather than discovered at runtime.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar

from deckwise.domain.errors import (
    AlgorithmMismatchError,
    InvalidButtonError,
    InvalidHyperparameterError,
    UnknownHyperparameterError,
    UnsupportedModeError,
)
from deckwise.domain.models import CardState, ModeState, RevisionMode


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class Hyperparameter:
    """
    Descriptor of a single tunable algorithm parameter.

    Attributes:
        name: Stable identifier used by settings surfaces and persistence.
        description_key: Translation key a presentation layer may resolve.
        value_type: int or float.
        minimum: Smallest accepted value (inclusive).
        default: Value used when a deck is created.
    """

    name: str
    description_key: str
    value_type: type
    minimum: float
    default: float

    def validate(self, value: object) -> int | float:
        """
        Convert and check a raw value.

        Numeric strings are accepted (settings forms deliver text).

        Raises:
            InvalidHyperparameterError: Non-numeric, non-finite, fractional
                where an integer is required, or below the minimum.
        """
        kind = "an integer" if self.value_type is int else "a number"

        if value is None or isinstance(value, bool):
            raise InvalidHyperparameterError(self.name, value, f"expected {kind}")

        if isinstance(value, str):
            text = value.strip()
            if not text:
                raise InvalidHyperparameterError(self.name, value, "a value is required")
            try:
                converted = self.value_type(text)
            except ValueError:
                raise InvalidHyperparameterError(self.name, value, f"expected {kind}") from None
        elif isinstance(value, (int, float)):
            if self.value_type is int and isinstance(value, float) and not value.is_integer():
                raise InvalidHyperparameterError(self.name, value, f"expected {kind}")
            try:
                converted = self.value_type(value)
            except (OverflowError, ValueError):
                raise InvalidHyperparameterError(self.name, value, "must be finite") from None
        else:
            raise InvalidHyperparameterError(self.name, value, f"expected {kind}")

        if not math.isfinite(converted):
            raise InvalidHyperparameterError(self.name, value, "must be finite")
        if converted < self.minimum:
            raise InvalidHyperparameterError(
                self.name, value, f"must be at least {self.minimum:g}"
            )
        return converted


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of answering a card: the updated copy and the session verdict."""

    card: CardState
    finished: bool


class RevisionAlgorithm(ABC):
    """
    Base class for revision algorithms.

    Subclasses declare:
        name: Stable identifier, independent of display locale.
        HYPERPARAMETERS: Ordered descriptor table.
        BUTTONS: Answer button identifiers per supported mode, button 1 first.
    """

    name: ClassVar[str]
    HYPERPARAMETERS: ClassVar[tuple[Hyperparameter, ...]]
    BUTTONS: ClassVar[dict[RevisionMode, tuple[str, ...]]]

    def __init__(self, hyperparameters: Mapping[str, object] | None = None):
        self._values: dict[str, int | float] = {
            hp.name: hp.value_type(hp.default) for hp in self.HYPERPARAMETERS
        }
        if hyperparameters:
            self.update_hyperparameters(hyperparameters)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    # ------------------------------------------------------------------
    # Hyperparameters
    # ------------------------------------------------------------------

    @classmethod
    def descriptors(cls) -> tuple[Hyperparameter, ...]:
        return cls.HYPERPARAMETERS

    @classmethod
    def descriptor(cls, name: str) -> Hyperparameter:
        for hp in cls.HYPERPARAMETERS:
            if hp.name == name:
                return hp
        raise UnknownHyperparameterError(name, cls.name)

    def hyperparameters(self) -> dict[str, int | float]:
        """Current values, in declaration order."""
        return dict(self._values)

    def get_hyperparameter(self, name: str) -> int | float:
        return self._values[self.descriptor(name).name]

    def set_hyperparameter(self, name: str, value: object) -> None:
        """
        Validate and assign one hyperparameter.

        Raises:
            UnknownHyperparameterError: No parameter with this name.
            InvalidHyperparameterError: The value failed validation. The
                current value is left unchanged.
        """
        self._values[name] = self.descriptor(name).validate(value)

    def update_hyperparameters(self, values: Mapping[str, object]) -> None:
        """Validate every value first, then apply all of them or none."""
        validated = {name: self.descriptor(name).validate(raw) for name, raw in values.items()}
        self._values.update(validated)

    # ------------------------------------------------------------------
    # Modes and buttons
    # ------------------------------------------------------------------

    def modes(self) -> tuple[RevisionMode, ...]:
        return tuple(self.BUTTONS)

    def button_ids(self, mode: RevisionMode) -> tuple[str, ...]:
        mode = RevisionMode(mode)
        if mode not in self.BUTTONS:
            raise UnsupportedModeError(f"Algorithm '{self.name}' does not support {mode.value} mode")
        return self.BUTTONS[mode]

    def button_count(self, mode: RevisionMode) -> int:
        return len(self.button_ids(mode))

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def create_new_card(
        self,
        front: str,
        back: str,
        *,
        deck_id: str = "",
        card_id: str | None = None,
        now: datetime | None = None,
    ) -> CardState:
        """
        Create a new card seeded with this algorithm's default state.

        Both modes are due on the creation day; the card stays new until its
        first answer.
        """
        if card_id is None:
            from deckwise.application.id_service import generate_card_id

            card_id = generate_card_id()
        now = now or datetime.now()
        today = now.date()
        return CardState(
            id=card_id,
            deck_id=deck_id,
            front=front,
            back=back,
            regular=self.default_state(RevisionMode.REGULAR, today),
            reverse=self.default_state(RevisionMode.REVERSE, today),
            creation_time=now,
            is_new=True,
        )

    def answer(
        self,
        card: CardState,
        button: int,
        mode: RevisionMode,
        today: date | None = None,
    ) -> AnswerOutcome:
        """
        Apply an answer to a copy of the card.

        Args:
            card: Card being revised. Not mutated.
            button: 1-based answer button.
            mode: Mode the card is revised in.
            today: Day of the answer; defaults to the current date.

        Returns:
            AnswerOutcome with the updated card and whether the card leaves
            the current session.

        Raises:
            InvalidButtonError: Button outside 1..button_count(mode).
            AlgorithmMismatchError: The card was created by another algorithm.
        """
        mode = RevisionMode(mode)
        count = self.button_count(mode)
        if isinstance(button, bool) or not isinstance(button, int) or not 1 <= button <= count:
            raise InvalidButtonError(button, mode.value, count)

        state = card.state_for(mode)
        if state.kind != self.name:
            raise AlgorithmMismatchError(
                f"Card {card.id} holds '{state.kind}' state, not '{self.name}'"
            )

        new_state, finished = self._revise(state, button, mode, today or date.today())
        return AnswerOutcome(card=card.with_state(mode, new_state), finished=finished)

    @abstractmethod
    def default_state(self, mode: RevisionMode, today: date) -> ModeState:
        """State of a freshly created (or reset) card in one mode."""

    @abstractmethod
    def _revise(
        self, state: ModeState, button: int, mode: RevisionMode, today: date
    ) -> tuple[ModeState, bool]:
        """Compute the next state for a validated button press."""
