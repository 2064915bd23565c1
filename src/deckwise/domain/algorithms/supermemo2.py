"""
SuperMemo-2 revision algorithm.

Algorithm described at:
https://www.supermemo.com/en/archives1990-2015/english/ol/sm2
"""

from dataclasses import replace
from datetime import date, timedelta

from deckwise.domain.constants import (
    MIN_EASINESS_FACTOR,
    MIN_INCORRECT_THRESHOLD,
    SM2_FIRST_INTERVAL,
    SM2_MAX_GRADE,
    SM2_PASSING_GRADE,
    SM2_SECOND_INTERVAL,
)
from deckwise.domain.models import RevisionMode, SuperMemo2State

from .base import Hyperparameter, RevisionAlgorithm, round_half_up

_KEY = "revision_algorithm.supermemo2"

_GRADES = tuple(f"grade_{grade}" for grade in range(1, SM2_MAX_GRADE + 1))


def next_easiness_factor(easiness_factor: float, grade: int) -> float:
    q = SM2_MAX_GRADE - grade
    return easiness_factor + (0.1 - q * (0.08 + q * 0.02))


class SuperMemo2Algorithm(RevisionAlgorithm):
    """
    Five grade buttons per mode. Every answer finishes the card for the
    session; failing grades schedule it for tomorrow.
    """

    name = "supermemo2"

    HYPERPARAMETERS = (
        Hyperparameter(
            "initial_easiness_factor", f"{_KEY}.easiness_factor", float, MIN_EASINESS_FACTOR, 2.5
        ),
        Hyperparameter(
            "incorrect_answer_threshold",
            f"{_KEY}.incorrect_threshold",
            int,
            MIN_INCORRECT_THRESHOLD,
            3,
        ),
        Hyperparameter(
            "reverse_initial_easiness_factor",
            f"{_KEY}.reverse_easiness_factor",
            float,
            MIN_EASINESS_FACTOR,
            2.5,
        ),
        Hyperparameter(
            "reverse_incorrect_answer_threshold",
            f"{_KEY}.reverse_incorrect_threshold",
            int,
            MIN_INCORRECT_THRESHOLD,
            3,
        ),
    )

    BUTTONS = {
        RevisionMode.REGULAR: _GRADES,
        RevisionMode.REVERSE: _GRADES,
    }

    def _prefix(self, mode: RevisionMode) -> str:
        return "reverse_" if mode == RevisionMode.REVERSE else ""

    def default_state(self, mode: RevisionMode, today: date) -> SuperMemo2State:
        return SuperMemo2State(
            next_revision_date=today,
            easiness_factor=self._values[f"{self._prefix(mode)}initial_easiness_factor"],
        )

    def _revise(
        self,
        state: SuperMemo2State,
        button: int,
        mode: RevisionMode,
        today: date,
    ) -> tuple[SuperMemo2State, bool]:
        grade = button

        if grade >= SM2_PASSING_GRADE:
            repetition_count = state.repetition_count + 1
            if repetition_count == 1:
                interval_days = SM2_FIRST_INTERVAL
            elif repetition_count == 2:
                interval_days = SM2_SECOND_INTERVAL
            else:
                interval_days = round_half_up(state.interval_days * state.easiness_factor)

            updated = replace(
                state,
                repetition_count=repetition_count,
                interval_days=interval_days,
                easiness_factor=next_easiness_factor(state.easiness_factor, grade),
            )
            next_date = today + timedelta(days=updated.interval_days)
            return replace(updated, next_revision_date=next_date), True

        incorrect_counter = state.incorrect_counter + 1
        if incorrect_counter >= self._values[f"{self._prefix(mode)}incorrect_answer_threshold"]:
            updated = self.default_state(mode, today)
        else:
            updated = replace(state, incorrect_counter=incorrect_counter)
        return replace(updated, next_revision_date=today + timedelta(days=1)), True
