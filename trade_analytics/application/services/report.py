"""Report Service: Export an analysis to files.

Formats:
- csv:     Summary block (Metric,Value), blank line, trade block
- xlsx:    "Summary" and "Trades" sheets
- parquet: Trade table only

CSV trade block:
    Pair,Start Date,Status,Trade Type,Profit/Loss
    EUR/USD,2024-01-05T00:00:00.000Z,Closed,buy,100

Cells containing a comma are wrapped in double quotes; nothing else is
escaped. The CSV importer does not unquote, so exported files are not
guaranteed to re-import cell-for-cell.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from trade_analytics.domain import KPISummary, TradeRecord
from trade_analytics.application.services.analysis import AnalysisResult, trades_frame


# =============================================================================
# Report Configuration
# =============================================================================

REPORT_FORMATS = ("csv", "xlsx", "parquet")


@dataclass(frozen=True)
class ReportConfig:
    """Configuration for report export.

    Attributes:
        output_dir: Directory for output files
        output_formats: Formats to write ("csv", "xlsx", "parquet")
    """
    output_dir: Path = Path(".")
    output_formats: tuple[str, ...] = ("csv",)


# =============================================================================
# Formatting Helpers
# =============================================================================

def format_number(value: float | int) -> str:
    """Render a number exactly, dropping a zero fraction.

    100.0 -> "100", -50.25 -> "-50.25", 0.004 -> "0.004". Values are never
    rounded.
    """
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_timestamp(trade: TradeRecord) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2024-01-05T09:30:00.000Z."""
    return trade.opened_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def escape_csv_cell(value: object) -> str:
    text = str(value)
    if "," in text:
        return f'"{text}"'
    return text


# =============================================================================
# Report Service
# =============================================================================

class ReportService:
    """Writes analysis results to disk.

    Example:
        >>> service = ReportService(ReportConfig(output_formats=("csv", "xlsx")))
        >>> service.save_report(result)
        [PosixPath('analysis_trades.csv'), PosixPath('analysis_trades.xlsx')]
    """

    TRADE_HEADER = ["Pair", "Start Date", "Status", "Trade Type", "Profit/Loss"]

    # (label, KPISummary field, format)
    SUMMARY_ROWS = [
        ("Total Trades", "total_trades", None),
        ("Winning Trades", "total_wins", None),
        ("Losing Trades", "total_losses", None),
        ("Win Rate (%)", "win_rate", ".2f"),
        ("Final PnL", "final_pnl", None),
        ("Total Profit", "total_profit", None),
        ("Total Loss", "total_loss", None),
        ("Highest Profit", "highest_profit", None),
        ("Highest Loss", "highest_loss", None),
        ("Weekly Avg PnL", "weekly_avg_pnl", None),
        ("Monthly Avg PnL", "monthly_avg_pnl", None),
        ("Avg Trades / Week", "avg_trades_per_week", ".1f"),
        ("Avg Trades / Month", "avg_trades_per_month", ".1f"),
        ("Longest Win Streak", "longest_win_streak", None),
        ("Longest Loss Streak", "longest_loss_streak", None),
        ("Current Streak", "current_streak", None),
        ("Current Streak Type", "current_streak_type", None),
    ]

    def __init__(self, config: ReportConfig | None = None):
        self._config = config or ReportConfig()

    @staticmethod
    def default_base_name(source_label: str) -> str:
        """Output name for a source: "analysis_<stem>" or "trade_analysis"."""
        if not source_label:
            return "trade_analysis"
        return f"analysis_{source_label.split('.')[0]}"

    def summary_rows(self, kpis: KPISummary) -> list[tuple[str, str]]:
        """(label, rendered value) for every KPI."""
        rows = []
        for label, field, fmt in self.SUMMARY_ROWS:
            value = getattr(kpis, field)
            if fmt:
                rendered = format(value, fmt)
            elif isinstance(value, str):
                rendered = value
            else:
                rendered = format_number(value)
            rows.append((label, rendered))
        return rows

    def trade_rows(self, records: Iterable[TradeRecord]) -> list[list[str]]:
        return [
            [
                trade.pair,
                format_timestamp(trade),
                trade.status,
                trade.side,
                format_number(trade.profit_or_loss),
            ]
            for trade in records
        ]

    def build_csv(self, records: Sequence[TradeRecord], kpis: KPISummary) -> str:
        """Render the two-block CSV export."""
        summary_lines = ["Metric,Value"] + [
            f"{label},{value}" for label, value in self.summary_rows(kpis)
        ]
        trade_lines = [",".join(self.TRADE_HEADER)] + [
            ",".join(escape_csv_cell(cell) for cell in row)
            for row in self.trade_rows(records)
        ]
        return "\n".join(summary_lines) + "\n\n" + "\n".join(trade_lines)

    def save_report(
        self,
        result: AnalysisResult,
        base_name: str | None = None,
        formats: tuple[str, ...] | None = None,
    ) -> list[Path]:
        """Save report to specified formats.

        Args:
            result: Analysis to export
            base_name: Base filename without extension
                (defaults to default_base_name(result.source_label))
            formats: Output formats (uses config if not provided)

        Returns:
            List of saved file paths
        """
        formats = formats or self._config.output_formats
        base_name = base_name or self.default_base_name(result.source_label)
        output_dir = self._config.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        saved = []

        for fmt in formats:
            path = output_dir / f"{base_name}.{fmt}"

            if fmt == "csv":
                path.write_text(self.build_csv(result.records, result.kpis), encoding="utf-8")
            elif fmt == "parquet":
                trades_frame(result.records).write_parquet(path)
            elif fmt == "xlsx":
                self._save_excel(result, path)
            else:
                raise ValueError(f"Unknown format: {fmt}")

            saved.append(path)

        return saved

    def _save_excel(self, result: AnalysisResult, path: Path) -> None:
        """Save report to Excel.

        Creates two sheets:
        1. Summary - Metric / Value pairs
        2. Trades - One row per trade
        """
        import xlsxwriter

        workbook = xlsxwriter.Workbook(str(path))
        header_fmt = workbook.add_format({
            "bold": True,
            "bg_color": "#4472C4",
            "font_color": "white",
            "border": 1,
        })
        pnl_fmt = workbook.add_format({"num_format": "#,##0.00"})
        count_fmt = workbook.add_format({"num_format": "0"})
        formats = {
            ".2f": workbook.add_format({"num_format": "0.00"}),
            ".1f": workbook.add_format({"num_format": "0.0"}),
        }

        ws1 = workbook.add_worksheet("Summary")
        ws1.write_row(0, 0, ["Metric", "Value"], header_fmt)
        for row_idx, (label, field, fmt) in enumerate(self.SUMMARY_ROWS, 1):
            value = getattr(result.kpis, field)
            ws1.write(row_idx, 0, label)

            # Numbers stay numeric; only the streak type is text
            if isinstance(value, str):
                ws1.write_string(row_idx, 1, value)
            elif fmt:
                ws1.write_number(row_idx, 1, value, formats[fmt])
            elif isinstance(value, int):
                ws1.write_number(row_idx, 1, value, count_fmt)
            else:
                ws1.write_number(row_idx, 1, value, pnl_fmt)
        ws1.set_column(0, 0, 22)
        ws1.set_column(1, 1, 14)

        ws2 = workbook.add_worksheet("Trades")
        ws2.write_row(0, 0, self.TRADE_HEADER, header_fmt)
        for row_idx, trade in enumerate(result.records, 1):
            ws2.write(row_idx, 0, trade.pair)
            ws2.write(row_idx, 1, format_timestamp(trade))
            ws2.write(row_idx, 2, trade.status)
            ws2.write(row_idx, 3, trade.side)
            ws2.write_number(row_idx, 4, trade.profit_or_loss, pnl_fmt)

        # Adjust column widths
        for col_idx, col_name in enumerate(self.TRADE_HEADER):
            width = max(len(col_name), 12)
            ws2.set_column(col_idx, col_idx, width)
        ws2.set_column(1, 1, 26)

        workbook.close()
