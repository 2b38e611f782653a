"""Chart Data: Per-month series for plotting.

Groups trades by UTC calendar month and emits two parallel series,
ordered by month ascending:

- monthly_pnl:      net PNL per month
- monthly_high_low: best winning trade and worst losing trade per month
                    (0 when the month has no wins / no losses)

Months without trades are not emitted.
"""

from typing import Iterable

from trade_analytics.domain.calendar import month_key, month_label
from trade_analytics.domain.models import (
    ChartSeries,
    MonthlyHighLow,
    MonthlyPnl,
    TradeRecord,
    chronological,
)


def group_by_month(records: Iterable[TradeRecord]) -> dict[str, list[float]]:
    """Map "YYYY-MM" key -> PNL values of that month, in time order."""
    months: dict[str, list[float]] = {}
    for trade in chronological(records):
        months.setdefault(month_key(trade.opened_at), []).append(trade.profit_or_loss)
    return months


def calculate_chart_data(records: Iterable[TradeRecord]) -> ChartSeries:
    """Build the monthly PNL and high/low series.

    Args:
        records: Trades in any order (the input is not modified)

    Returns:
        ChartSeries (empty for empty input)
    """
    months = group_by_month(records)

    monthly_pnl = []
    monthly_high_low = []

    # Zero-padded "YYYY-MM" keys sort chronologically
    for key in sorted(months):
        values = months[key]
        label = month_label(key)
        monthly_pnl.append(MonthlyPnl(label=label, pnl=sum(values)))
        monthly_high_low.append(
            MonthlyHighLow(
                label=label,
                highest=max((v for v in values if v > 0), default=0.0),
                lowest=min((v for v in values if v < 0), default=0.0),
            )
        )

    return ChartSeries(
        monthly_pnl=tuple(monthly_pnl),
        monthly_high_low=tuple(monthly_high_low),
    )
