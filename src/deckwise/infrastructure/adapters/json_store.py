"""
JSON File Store: Infrastructure adapter persisting to a single JSON document.

The whole document is read on first use and rewritten after every mutation.
Writes go to a temporary file in the same directory which then replaces the
target, so a crash never leaves a half-written store behind.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

from deckwise.domain.models import CardState, Deck, RevisionHistoryEntry
from deckwise.domain.stats.models import DeckStatistics

from .memory_store import InMemoryStore

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1


class StoreDocument(BaseModel):
    """On-disk layout of the store."""

    version: int = STORE_FORMAT_VERSION
    decks: dict[str, Deck] = Field(default_factory=dict)
    cards: dict[str, CardState] = Field(default_factory=dict)
    statistics: dict[str, DeckStatistics] = Field(default_factory=dict)
    history: list[RevisionHistoryEntry] = Field(default_factory=list)


class JsonFileStore(InMemoryStore):
    """
    Persists decks, cards, statistics and history to one JSON file.

    Read and write errors (including a corrupt document) propagate to the
    caller unchanged.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug(f"No store at {self.path}; starting empty")
            return

        document = StoreDocument.model_validate_json(self.path.read_text(encoding="utf-8"))
        self.decks = document.decks
        self.cards = document.cards
        self.statistics = document.statistics
        self.history = document.history
        logger.debug(
            f"Loaded {len(self.decks)} decks and {len(self.cards)} cards from {self.path}"
        )

    def _changed(self) -> None:
        self.flush()

    def flush(self) -> None:
        """Write the current state to disk atomically."""
        document = StoreDocument(
            decks=self.decks,
            cards=self.cards,
            statistics=self.statistics,
            history=self.history,
        )
        payload = document.model_dump_json(indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
