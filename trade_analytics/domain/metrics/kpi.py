"""KPI Aggregation: Summary statistics for a set of trades.

Computes every field of KPISummary in one pass over the chronologically
sorted trades, plus the streak pass in streaks.py.

Averages:
    weekly_avg_pnl      = Σ(week PNL) / number of active weeks
    avg_trades_per_week = total trades / number of active weeks
    (monthly variants are analogous)

Only buckets that contain at least one trade count as "active", so quiet
weeks do not dilute the averages.
"""

from collections import defaultdict
from typing import Iterable

from trade_analytics.domain.calendar import week_bucket, month_bucket
from trade_analytics.domain.models import KPISummary, TradeRecord, chronological
from trade_analytics.domain.metrics.streaks import calculate_streaks


def _mean_per_bucket(total: float, bucket_count: int) -> float:
    return total / bucket_count if bucket_count > 0 else 0.0


def calculate_kpis(records: Iterable[TradeRecord]) -> KPISummary:
    """Calculate the KPI summary for a set of trades.

    Total function: an empty input yields KPISummary.empty().

    Args:
        records: Trades in any order (the input is not modified)

    Returns:
        KPISummary

    Example:
        >>> kpis = calculate_kpis(trades)
        >>> f"{kpis.win_rate:.1f}%"
        '50.0%'
    """
    trades = chronological(records)
    if not trades:
        return KPISummary.empty()

    final_pnl = 0.0
    total_profit = 0.0
    total_loss = 0.0
    total_wins = 0
    total_losses = 0
    highest_profit = 0.0
    highest_loss = 0.0

    weekly_pnls: dict[tuple[int, int], float] = defaultdict(float)
    monthly_pnls: dict[tuple[int, int], float] = defaultdict(float)

    for trade in trades:
        pnl = trade.profit_or_loss
        final_pnl += pnl

        if pnl > 0:
            total_wins += 1
            total_profit += pnl
            highest_profit = max(highest_profit, pnl)
        elif pnl < 0:
            total_losses += 1
            total_loss += pnl
            highest_loss = min(highest_loss, pnl)

        weekly_pnls[week_bucket(trade.opened_at)] += pnl
        monthly_pnls[month_bucket(trade.opened_at)] += pnl

    total_trades = len(trades)
    n_weeks = len(weekly_pnls)
    n_months = len(monthly_pnls)

    streaks = calculate_streaks(trades)

    return KPISummary(
        final_pnl=final_pnl,
        total_profit=total_profit,
        total_loss=total_loss,
        win_rate=total_wins / total_trades * 100,
        total_trades=total_trades,
        total_wins=total_wins,
        total_losses=total_losses,
        longest_win_streak=streaks.longest_win_streak,
        longest_loss_streak=streaks.longest_loss_streak,
        current_streak=streaks.current_streak,
        current_streak_type=streaks.current_streak_type,
        highest_profit=highest_profit,
        highest_loss=highest_loss,
        weekly_avg_pnl=_mean_per_bucket(sum(weekly_pnls.values()), n_weeks),
        monthly_avg_pnl=_mean_per_bucket(sum(monthly_pnls.values()), n_months),
        avg_trades_per_week=_mean_per_bucket(total_trades, n_weeks),
        avg_trades_per_month=_mean_per_bucket(total_trades, n_months),
    )
