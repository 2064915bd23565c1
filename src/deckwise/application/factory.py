"""
Service Factory
Centralizes the wiring of persistence adapters into application services.
"""

import logging

from deckwise.application.charts import ChartService
from deckwise.application.config import AppConfig
from deckwise.application.deck_service import DeckService
from deckwise.application.stats.service import DeckStatisticsService
from deckwise.infrastructure.adapters.json_store import JsonFileStore
from deckwise.infrastructure.adapters.memory_store import InMemoryStore

logger = logging.getLogger(__name__)


def get_store(config: AppConfig) -> InMemoryStore:
    """
    Returns the store backing all persistence ports.
    """
    logger.debug(f"Using data file {config.data_file}")
    return JsonFileStore(config.data_file)


def build_deck_service(config: AppConfig, store: InMemoryStore | None = None) -> DeckService:
    """
    Returns a DeckService wired to the given store, or to the configured one.
    """
    store = store if store is not None else get_store(config)
    statistics = DeckStatisticsService(store)
    return DeckService(
        deck_repo=store,
        card_repo=store,
        history=store,
        statistics=statistics,
        default_algorithm=config.default_algorithm,
        default_new_cards_per_day=config.default_new_cards_per_day,
    )


def build_chart_service(deck_service: DeckService) -> ChartService:
    return ChartService(deck_service)
