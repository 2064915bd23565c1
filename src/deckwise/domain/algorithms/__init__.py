# Revision Algorithms Package
from .base import AnswerOutcome, Hyperparameter, RevisionAlgorithm, round_half_up
from .constant_coefficient import ConstantCoefficientAlgorithm
from .registry import ALGORITHMS, algorithm_for_deck, available_algorithms, create_algorithm
from .supermemo2 import SuperMemo2Algorithm

__all__ = [
    "ALGORITHMS",
    "AnswerOutcome",
    "ConstantCoefficientAlgorithm",
    "Hyperparameter",
    "RevisionAlgorithm",
    "SuperMemo2Algorithm",
    "algorithm_for_deck",
    "available_algorithms",
    "create_algorithm",
    "round_half_up",
]
