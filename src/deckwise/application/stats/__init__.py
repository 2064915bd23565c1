# Application Stats Package
from .rolling import new_cards_available_today, roll_forward, shift_window
from .service import DeckStatisticsService

__all__ = [
    "DeckStatisticsService",
    "new_cards_available_today",
    "roll_forward",
    "shift_window",
]
