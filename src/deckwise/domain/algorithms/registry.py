"""
Static registration table of the available revision algorithms.
"""

from collections.abc import Mapping

from deckwise.domain.errors import UnknownAlgorithmError
from deckwise.domain.models import Deck

from .base import RevisionAlgorithm
from .constant_coefficient import ConstantCoefficientAlgorithm
from .supermemo2 import SuperMemo2Algorithm

ALGORITHMS: dict[str, type[RevisionAlgorithm]] = {
    ConstantCoefficientAlgorithm.name: ConstantCoefficientAlgorithm,
    SuperMemo2Algorithm.name: SuperMemo2Algorithm,
}


def available_algorithms() -> list[str]:
    return list(ALGORITHMS)


def create_algorithm(
    name: str, hyperparameters: Mapping[str, object] | None = None
) -> RevisionAlgorithm:
    """
    Instantiate a registered algorithm.

    Raises:
        UnknownAlgorithmError: name is not registered.
        InvalidHyperparameterError / UnknownHyperparameterError: bad overrides.
    """
    try:
        algorithm_cls = ALGORITHMS[name]
    except KeyError:
        raise UnknownAlgorithmError(
            f"Unknown algorithm '{name}'. Available: {', '.join(ALGORITHMS)}"
        ) from None
    return algorithm_cls(hyperparameters)


def algorithm_for_deck(deck: Deck) -> RevisionAlgorithm:
    return create_algorithm(deck.algorithm, deck.hyperparameters)
