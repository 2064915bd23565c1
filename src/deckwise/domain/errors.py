"""
Typed errors raised by the scheduling core and its services.

Every error derives from DeckwiseError so callers (the CLI in particular)
can report them uniformly. Errors that correspond to a bad argument also
inherit from the matching builtin.
"""


class DeckwiseError(Exception):
    """Base class for all deckwise errors."""


class InvalidHyperparameterError(DeckwiseError, ValueError):
    """A hyperparameter value is non-numeric or below its declared minimum."""

    def __init__(self, name: str, value: object, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for '{name}': {reason}")


class UnknownHyperparameterError(DeckwiseError, KeyError):
    """The algorithm has no hyperparameter with the given name."""

    def __init__(self, name: str, algorithm: str):
        self.name = name
        self.algorithm = algorithm
        super().__init__(f"Algorithm '{algorithm}' has no hyperparameter '{name}'")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidButtonError(DeckwiseError, ValueError):
    """An answer button outside the algorithm's fixed set was pressed."""

    def __init__(self, button: int, mode: str, button_count: int):
        self.button = button
        self.mode = mode
        self.button_count = button_count
        super().__init__(
            f"Button {button} is not valid in {mode} mode (expected 1-{button_count})"
        )


class UnknownAlgorithmError(DeckwiseError, ValueError):
    """No revision algorithm is registered under the given name."""


class AlgorithmMismatchError(DeckwiseError, TypeError):
    """The card's scheduling state belongs to a different algorithm."""


class UnsupportedModeError(DeckwiseError, ValueError):
    """The algorithm does not support the requested revision mode."""


class DeckNotFoundError(DeckwiseError, LookupError):
    """No deck exists with the given id."""


class CardNotFoundError(DeckwiseError, LookupError):
    """No card exists with the given id."""


class SessionEndedError(DeckwiseError):
    """An answer was submitted after the revision session ran out of cards."""


class InvalidSettingError(DeckwiseError, ValueError):
    """A deck-level setting (e.g. new cards per day) is out of range."""


class InvalidCardError(DeckwiseError, ValueError):
    """A card's front or back text is empty."""
