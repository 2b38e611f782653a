"""Streaks: Runs of consecutive wins or losses.

A streak is a maximal run, in time order, of trades sharing the same
win/loss sign. A flat trade (PNL exactly 0) belongs to neither side and
breaks any run in progress.

Both functions expect trades already sorted chronologically.
"""

from dataclasses import dataclass
from typing import Sequence

from trade_analytics.domain.models import TradeRecord, StreakType


@dataclass(frozen=True, slots=True)
class StreakStats:
    """Streak statistics for a chronological trade sequence.

    Attributes:
        longest_win_streak: Longest run of consecutive wins
        longest_loss_streak: Longest run of consecutive losses
        current_streak: Length of the run ending at the last trade
        current_streak_type: Sign of that run ("none" if the last trade is flat)
    """
    longest_win_streak: int
    longest_loss_streak: int
    current_streak: int
    current_streak_type: StreakType


def calculate_longest_streaks(trades: Sequence[TradeRecord]) -> tuple[int, int]:
    """Return (longest_win_streak, longest_loss_streak)."""
    longest_win = 0
    longest_loss = 0
    win_run = 0
    loss_run = 0

    for trade in trades:
        if trade.is_win:
            win_run += 1
            loss_run = 0
            longest_win = max(longest_win, win_run)
        elif trade.is_loss:
            loss_run += 1
            win_run = 0
            longest_loss = max(longest_loss, loss_run)
        else:
            win_run = 0
            loss_run = 0

    return longest_win, longest_loss


def calculate_current_streak(trades: Sequence[TradeRecord]) -> tuple[int, StreakType]:
    """Return (length, type) of the run ending at the last trade.

    Walks backward from the latest trade while the sign matches.

    Example:
        >>> calculate_current_streak(trades)  # ..., -20, +10, +30
        (2, 'win')
    """
    if not trades:
        return 0, "none"

    last_sign = trades[-1].outcome
    if last_sign == 0:
        return 0, "none"

    length = 0
    for trade in reversed(trades):
        if trade.outcome != last_sign:
            break
        length += 1

    return length, "win" if last_sign > 0 else "loss"


def calculate_streaks(trades: Sequence[TradeRecord]) -> StreakStats:
    """Calculate all streak statistics for a chronological trade sequence."""
    longest_win, longest_loss = calculate_longest_streaks(trades)
    current, current_type = calculate_current_streak(trades)
    return StreakStats(
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
        current_streak=current,
        current_streak_type=current_type,
    )
