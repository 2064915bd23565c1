import os
from datetime import date, datetime, timedelta

import pytest

from deckwise.application.deck_service import DeckService
from deckwise.application.stats.service import DeckStatisticsService
from deckwise.infrastructure.adapters.memory_store import InMemoryStore

TODAY = date(2024, 3, 15)
NOW = datetime(2024, 3, 15, 9, 30)


class FakeClock:
    """Mutable clock shared by the services under test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def today(self) -> date:
        return self.now.date()

    def advance(self, days: int = 1) -> None:
        self.now += timedelta(days=days)


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config/logs and ignore any DECKWISE_* settings of the developer
    monkeypatch.setenv("HOME", str(home))
    for var in list(os.environ):
        if var.startswith("DECKWISE_"):
            monkeypatch.delenv(var)
    return home


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def stats_service(store, clock):
    return DeckStatisticsService(store, clock=clock.today)


@pytest.fixture
def deck_service(store, stats_service, clock):
    return DeckService(
        deck_repo=store,
        card_repo=store,
        history=store,
        statistics=stats_service,
        clock=clock,
    )
