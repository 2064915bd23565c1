# Domain Stats Package
from .models import DeckStatistics, empty_window
from .ports import StatisticsRepository

__all__ = ["DeckStatistics", "StatisticsRepository", "empty_window"]
