"""Trading metrics for trade-history analysis.

This package provides the aggregations behind the dashboard:

- KPI: Summary statistics (PNL, win rate, averages per week/month)
- Streaks: Longest and current win/loss runs
- Charts: Per-month PNL and high/low series

Usage:
    from trade_analytics.domain.metrics import (
        calculate_kpis,
        calculate_chart_data,
    )
"""

# KPI
from trade_analytics.domain.metrics.kpi import calculate_kpis

# Streaks
from trade_analytics.domain.metrics.streaks import (
    StreakStats,
    calculate_streaks,
    calculate_longest_streaks,
    calculate_current_streak,
)

# Charts
from trade_analytics.domain.metrics.charts import (
    calculate_chart_data,
    group_by_month,
)

__all__ = [
    # KPI
    "calculate_kpis",
    # Streaks
    "StreakStats",
    "calculate_streaks",
    "calculate_longest_streaks",
    "calculate_current_streak",
    # Charts
    "calculate_chart_data",
    "group_by_month",
]
