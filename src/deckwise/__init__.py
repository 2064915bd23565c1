"""deckwise: spaced-repetition scheduling for flashcard decks."""

from deckwise.consts import VERSION

__version__ = VERSION
