"""
Constant-coefficient revision algorithm.

Each answer button multiplies the card's base revision time by a fixed
coefficient; the next revision is that many days away (at least one).
"""

from dataclasses import replace
from datetime import date, timedelta

from deckwise.domain.constants import MIN_COEFFICIENT, MIN_INCORRECT_THRESHOLD
from deckwise.domain.models import ConstantCoefficientState, RevisionMode

from .base import Hyperparameter, RevisionAlgorithm, round_half_up

_KEY = "revision_algorithm.const_coeff"

AGAIN_BUTTON = 1


class ConstantCoefficientAlgorithm(RevisionAlgorithm):
    """
    Regular mode has four buttons (again, weak, good, excellent) backed by
    coefficient1..4; reverse mode has two (again, excellent) backed by
    reverse_coefficient1..2. "Again" keeps the card in the session and counts
    towards the incorrect-answer threshold, which resets the mode's state.
    """

    name = "constant_coefficient"

    HYPERPARAMETERS = (
        Hyperparameter("coefficient1", f"{_KEY}.normal_coeff_1", float, MIN_COEFFICIENT, 0.25),
        Hyperparameter("coefficient2", f"{_KEY}.normal_coeff_2", float, MIN_COEFFICIENT, 0.5),
        Hyperparameter("coefficient3", f"{_KEY}.normal_coeff_3", float, MIN_COEFFICIENT, 1.0),
        Hyperparameter("coefficient4", f"{_KEY}.normal_coeff_4", float, MIN_COEFFICIENT, 1.5),
        Hyperparameter(
            "incorrect_answer_threshold",
            f"{_KEY}.normal_incorrect",
            int,
            MIN_INCORRECT_THRESHOLD,
            5,
        ),
        Hyperparameter(
            "reverse_coefficient1", f"{_KEY}.reverse_coeff_1", float, MIN_COEFFICIENT, 0.25
        ),
        Hyperparameter(
            "reverse_coefficient2", f"{_KEY}.reverse_coeff_2", float, MIN_COEFFICIENT, 1.5
        ),
        Hyperparameter(
            "reverse_incorrect_answer_threshold",
            f"{_KEY}.reverse_incorrect",
            int,
            MIN_INCORRECT_THRESHOLD,
            5,
        ),
    )

    BUTTONS = {
        RevisionMode.REGULAR: ("again", "weak", "good", "excellent"),
        RevisionMode.REVERSE: ("again", "excellent"),
    }

    def default_state(self, mode: RevisionMode, today: date) -> ConstantCoefficientState:
        return ConstantCoefficientState(next_revision_date=today)

    def _revise(
        self,
        state: ConstantCoefficientState,
        button: int,
        mode: RevisionMode,
        today: date,
    ) -> tuple[ConstantCoefficientState, bool]:
        prefix = "reverse_" if mode == RevisionMode.REVERSE else ""
        coefficient = self._values[f"{prefix}coefficient{button}"]
        base_revision_time = state.base_revision_time * coefficient

        if button == AGAIN_BUTTON:
            incorrect_counter = state.incorrect_counter + 1
            if incorrect_counter >= self._values[f"{prefix}incorrect_answer_threshold"]:
                return self.default_state(mode, today), False
            return (
                replace(
                    state,
                    base_revision_time=base_revision_time,
                    incorrect_counter=incorrect_counter,
                    next_revision_date=today,
                ),
                False,
            )

        updated = replace(state, base_revision_time=base_revision_time)
        days = max(round_half_up(updated.base_revision_time), 1)
        return replace(updated, next_revision_date=today + timedelta(days=days)), True
