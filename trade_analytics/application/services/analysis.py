"""Analysis Service: Filter trades and compute dashboard data.

Orchestrates one analysis run:
1. Apply the user's filter (date range, pair, side) to the full trade set
2. Compute KPIs and chart series on the filtered subset
3. Bundle everything for display and export

Filtering happens here, before the domain aggregations; the metrics
themselves never filter.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

import polars as pl

from trade_analytics.domain import (
    ChartSeries,
    KPISummary,
    Side,
    TradeRecord,
    calculate_chart_data,
    calculate_kpis,
)

# Columns of the trade table, in display order
TABLE_COLUMNS = ["pair", "opened_at", "status", "side", "profit_or_loss"]

TRADE_SCHEMA = {
    "pair": pl.Utf8,
    "opened_at": pl.Datetime("us", "UTC"),
    "status": pl.Utf8,
    "side": pl.Utf8,
    "profit_or_loss": pl.Float64,
}


# =============================================================================
# Filter
# =============================================================================

@dataclass(frozen=True)
class TradeFilter:
    """Subset selection applied before aggregation.

    Attributes:
        start_date: First UTC calendar day to include (None = unbounded)
        end_date: Last UTC calendar day to include (None = unbounded)
        pair: Exact instrument to keep (None = all)
        side: "buy" or "sell" (None = all)
    """
    start_date: date | None = None
    end_date: date | None = None
    pair: str | None = None
    side: Side | None = None

    def __post_init__(self) -> None:
        if self.side is not None and self.side not in ("buy", "sell"):
            raise ValueError(f"side must be 'buy' or 'sell', got: {self.side}")

    @property
    def is_active(self) -> bool:
        return any(
            v is not None
            for v in (self.start_date, self.end_date, self.pair, self.side)
        )

    def matches(self, trade: TradeRecord) -> bool:
        day = trade.opened_at.date()
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        if self.pair is not None and trade.pair != self.pair:
            return False
        if self.side is not None and trade.side != self.side:
            return False
        return True

    def apply(self, records: Iterable[TradeRecord]) -> list[TradeRecord]:
        """Return the matching trades, preserving order."""
        return [r for r in records if self.matches(r)]


# =============================================================================
# Trade Table Helpers
# =============================================================================

def unique_pairs(records: Iterable[TradeRecord]) -> list[str]:
    """Sorted list of distinct instruments (for filter choices)."""
    return sorted({r.pair for r in records})


def trades_frame(records: Sequence[TradeRecord]) -> pl.DataFrame:
    """Convert trades to a polars DataFrame with TABLE_COLUMNS."""
    data = {col: [getattr(r, col) for r in records] for col in TABLE_COLUMNS}
    return pl.DataFrame(data, schema=TRADE_SCHEMA)


def sort_trades(
    records: Sequence[TradeRecord],
    column: str = "opened_at",
    descending: bool = False,
) -> list[TradeRecord]:
    """Sort trades by a table column (stable for equal values).

    Raises:
        ValueError: If column is not one of TABLE_COLUMNS
    """
    if column not in TABLE_COLUMNS:
        raise ValueError(f"Unknown column: {column}")

    order = (
        trades_frame(records)
        .with_row_index("row")
        .sort(column, descending=descending, maintain_order=True)
        ["row"]
        .to_list()
    )
    return [records[i] for i in order]


# =============================================================================
# Analysis Result
# =============================================================================

@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything the dashboard and exports need for one run."""
    source_label: str
    records: tuple[TradeRecord, ...]
    kpis: KPISummary
    charts: ChartSeries

    def to_dict(self) -> dict:
        return {
            "source_label": self.source_label,
            "kpis": self.kpis.to_dict(),
            "charts": self.charts.to_dict(),
            "trades": [
                {**r.to_dict(), "opened_at": r.opened_at.isoformat()}
                for r in self.records
            ],
        }


class TradeAnalyzer:
    """Computes KPIs and chart data for a (filtered) trade set.

    Stateless; safe to reuse across runs.

    Example:
        >>> analyzer = TradeAnalyzer()
        >>> result = analyzer.analyze(trades, TradeFilter(pair="EUR/USD"))
        >>> result.kpis.final_pnl
        50.0
    """

    def analyze(
        self,
        records: Iterable[TradeRecord],
        trade_filter: TradeFilter | None = None,
        source_label: str = "",
    ) -> AnalysisResult:
        """Run one analysis.

        Args:
            records: Full trade set
            trade_filter: Optional subset selection
            source_label: Name of the import (for reports)

        Returns:
            AnalysisResult over the filtered trades
        """
        selected = trade_filter.apply(records) if trade_filter else list(records)
        return AnalysisResult(
            source_label=source_label,
            records=tuple(selected),
            kpis=calculate_kpis(selected),
            charts=calculate_chart_data(selected),
        )
