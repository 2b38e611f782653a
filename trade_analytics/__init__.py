"""Trade Analytics: Performance analysis for imported trade history.

Imports a broker statement (CSV or screenshots), parses the trades and
computes profit/loss, win rate, streaks and per-week / per-month
averages, plus monthly chart series and report exports.

Architecture:
- domain/: Core business logic (models, calendar buckets, metrics)
- infrastructure/: I/O and external dependencies
- application/: Use cases and services
- interfaces/: CLI
"""

__version__ = "0.1.0"

from trade_analytics.domain import (
    TradeRecord,
    KPISummary,
    ChartSeries,
    Side,
    calculate_kpis,
    calculate_chart_data,
)
from trade_analytics.infrastructure import (
    FormatError,
    ExtractionError,
    RepositoryError,
    parse_trades,
)

__all__ = [
    # Version
    "__version__",
    # Domain
    "TradeRecord",
    "KPISummary",
    "ChartSeries",
    "Side",
    "calculate_kpis",
    "calculate_chart_data",
    # Infrastructure
    "FormatError",
    "ExtractionError",
    "RepositoryError",
    "parse_trades",
]
