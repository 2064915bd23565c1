"""
Rolling-window arithmetic for deck statistics.

This is a pure computation module with no I/O.
"""

from datetime import date

from deckwise.domain.stats.models import DeckStatistics


def shift_window(window: list[int], days: int) -> None:
    """
    Shift a "days ago" window forward in place.

    The value at index i moves to i + days; indices that fall off the end are
    dropped and the newly exposed days are zeroed.
    """
    if days <= 0:
        return

    size = len(window)
    if days >= size:
        window[:] = [0] * size
        return

    for i in range(size - 1, days - 1, -1):
        window[i] = window[i - days]
    for i in range(days):
        window[i] = 0


def roll_forward(stats: DeckStatistics, today: date) -> bool:
    """
    Align every window of stats with today.

    Returns:
        True if the windows moved (the caller should persist), False when
        today is not after the watermark.
    """
    days_between = (today - stats.today_indicator).days
    if days_between <= 0:
        return False

    for window in stats.tracked_windows():
        shift_window(window, days_between)
    stats.today_indicator = today
    return True


def new_cards_available_today(stats: DeckStatistics, total_new_cards: int) -> int:
    """
    Remaining new-card quota for today.

    The quota already consumed today is subtracted from the per-day limit; the
    result never exceeds the number of new cards and is never negative.
    """
    remaining = stats.new_cards_per_day - stats.revised_for_the_first_time[0]
    return max(min(remaining, total_new_cards), 0)
