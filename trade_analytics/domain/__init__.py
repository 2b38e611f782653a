"""Domain Layer: Core business logic and entities.

This layer contains:
- models.py: Data structures (TradeRecord, KPISummary, ChartSeries)
- calendar.py: Week and month bucket keys
- metrics/: KPI, streak and chart aggregations

Nothing in this layer performs I/O.
"""

from trade_analytics.domain.models import (
    Side,
    StreakType,
    TradeRecord,
    KPISummary,
    MonthlyPnl,
    MonthlyHighLow,
    ChartSeries,
    chronological,
)
from trade_analytics.domain.calendar import (
    iso_week_number,
    week_bucket,
    month_bucket,
    month_key,
    month_label,
)
from trade_analytics.domain.metrics import (
    StreakStats,
    calculate_kpis,
    calculate_streaks,
    calculate_chart_data,
)

__all__ = [
    # Models
    "Side",
    "StreakType",
    "TradeRecord",
    "KPISummary",
    "MonthlyPnl",
    "MonthlyHighLow",
    "ChartSeries",
    "chronological",
    # Calendar
    "iso_week_number",
    "week_bucket",
    "month_bucket",
    "month_key",
    "month_label",
    # Metrics
    "StreakStats",
    "calculate_kpis",
    "calculate_streaks",
    "calculate_chart_data",
]
