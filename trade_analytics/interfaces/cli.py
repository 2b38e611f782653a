"""Command Line Interface for Trade Analytics.

Provides CLI access to the analysis:
- summary: KPI dashboard
- charts: Monthly PNL and high/low series
- trades: Trade table
- export: Write CSV / Excel / Parquet reports

Every command takes one CSV file or one or more statement images,
plus optional filters.

Usage:
    python -m trade_analytics summary FILE... [--from DATE] [--to DATE]
    python -m trade_analytics charts FILE... [--pair PAIR] [--side buy|sell]
    python -m trade_analytics trades FILE... [--sort COLUMN] [--desc]
    python -m trade_analytics export FILE... [-o NAME] [-f csv,xlsx,parquet]
"""

import argparse
import logging
import sys
from collections import Counter
from datetime import date
from pathlib import Path

from trade_analytics import __version__
from trade_analytics.infrastructure import (
    ExtractionError,
    ExtractorConfig,
    FormatError,
    OpenAITableExtractor,
    ParserConfig,
    RepositoryError,
)
from trade_analytics.infrastructure.logging import setup_logging
from trade_analytics.application import (
    AnalysisResult,
    ReportConfig,
    ReportService,
    TradeAnalyzer,
    TradeFilter,
    TradeImportService,
)
from trade_analytics.application.services import (
    REPORT_FORMATS,
    TABLE_COLUMNS,
    is_image_file,
    sort_trades,
    unique_pairs,
)


def _build_extractor(model: str) -> OpenAITableExtractor:
    from openai import OpenAI, OpenAIError

    try:
        client = OpenAI()
    except OpenAIError as e:
        raise ExtractionError(f"Cannot create OpenAI client: {e}") from e
    return OpenAITableExtractor(client, ExtractorConfig(model=model))


def _load(args: argparse.Namespace) -> AnalysisResult:
    """Import the selected files and run the analysis."""
    paths = [Path(f) for f in args.files]
    extractor = None
    if any(is_image_file(p) for p in paths):
        extractor = _build_extractor(args.model)

    service = TradeImportService(
        extractor=extractor,
        config=ParserConfig(strict_side=args.strict_side),
    )
    imported = service.load(paths)

    if imported.skipped:
        reasons = Counter(s.reason for s in imported.skipped)
        detail = ", ".join(f"{reason}: {n}" for reason, n in sorted(reasons.items()))
        print(f"Skipped {len(imported.skipped)} rows ({detail})")

    trade_filter = TradeFilter(
        start_date=args.start_date,
        end_date=args.end_date,
        pair=args.pair,
        side=args.side,
    )
    return TradeAnalyzer().analyze(
        imported.records,
        trade_filter if trade_filter.is_active else None,
        source_label=imported.source_label,
    )


def cmd_summary(args: argparse.Namespace) -> int:
    """Show the KPI dashboard."""
    result = _load(args)
    kpis = result.kpis

    print(f"Analysis for: {result.source_label}")
    print("=" * 50)
    print(f"Pairs: {', '.join(unique_pairs(result.records)) or '-'}")
    print()

    print("[PnL]")
    print(f"  Final PnL:       {kpis.final_pnl:+,.2f}")
    print(f"  Total Profit:    {kpis.total_profit:+,.2f}")
    print(f"  Total Loss:      {kpis.total_loss:+,.2f}")
    print(f"  Highest Profit:  {kpis.highest_profit:+,.2f}")
    print(f"  Highest Loss:    {kpis.highest_loss:+,.2f}")
    print()

    print("[Trades]")
    print(f"  Total Trades:    {kpis.total_trades:,}")
    print(f"  Wins / Losses:   {kpis.total_wins:,} / {kpis.total_losses:,}")
    print(f"  Win Rate:        {kpis.win_rate:.1f}%")
    print()

    print("[Averages]")
    print(f"  Weekly Avg PnL:  {kpis.weekly_avg_pnl:+,.2f}")
    print(f"  Monthly Avg PnL: {kpis.monthly_avg_pnl:+,.2f}")
    print(f"  Trades / Week:   {kpis.avg_trades_per_week:.1f}")
    print(f"  Trades / Month:  {kpis.avg_trades_per_month:.1f}")
    print()

    print("[Streaks]")
    print(f"  Longest Win:     {kpis.longest_win_streak}")
    print(f"  Longest Loss:    {kpis.longest_loss_streak}")
    print(f"  Current:         {kpis.current_streak} ({kpis.current_streak_type})")

    return 0


def cmd_charts(args: argparse.Namespace) -> int:
    """Show monthly series."""
    result = _load(args)

    if result.charts.is_empty:
        print("No trades match the current filters")
        return 0

    print(f"{'Month':<6} {'PnL':>12} {'Highest':>12} {'Lowest':>12}")
    print("-" * 45)
    for pnl, high_low in zip(result.charts.monthly_pnl, result.charts.monthly_high_low):
        print(f"{pnl.label:<6} {pnl.pnl:>+12,.2f} "
              f"{high_low.highest:>+12,.2f} {high_low.lowest:>+12,.2f}")

    return 0


def cmd_trades(args: argparse.Namespace) -> int:
    """Show the trade table."""
    result = _load(args)
    trades = sort_trades(result.records, args.sort, args.desc)

    print(f"{'Pair':<12} {'Start Date':<20} {'Status':<10} {'Type':<5} {'Profit/Loss':>12}")
    print("-" * 63)
    for trade in trades:
        print(f"{trade.pair:<12} {trade.opened_at:%Y-%m-%d %H:%M:%S} "
              f"{trade.status:<10} {trade.side:<5} {trade.profit_or_loss:>+12,.2f}")
    print(f"{len(trades)} trades")

    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Write report files."""
    result = _load(args)

    service = ReportService(
        ReportConfig(
            output_dir=Path(args.output_dir),
            output_formats=args.formats,
        )
    )
    for path in service.save_report(result, base_name=args.output):
        print(f"Saved: {path}")

    return 0


def _date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got: {value}")


def _formats_arg(value: str) -> tuple[str, ...]:
    formats = tuple(f.strip().lower() for f in value.split(",") if f.strip())
    unknown = [f for f in formats if f not in REPORT_FORMATS]
    if unknown or not formats:
        raise argparse.ArgumentTypeError(
            f"expected a comma-separated list of {', '.join(REPORT_FORMATS)}, got: {value}"
        )
    return formats


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="+", help="One CSV file or one or more images")
    parser.add_argument("--from", dest="start_date", type=_date_arg,
                        help="First day to include (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end_date", type=_date_arg,
                        help="Last day to include (YYYY-MM-DD)")
    parser.add_argument("--pair", help="Only this instrument")
    parser.add_argument("--side", choices=["buy", "sell"], help="Only this trade type")
    parser.add_argument(
        "--strict-side",
        action="store_true",
        help="Skip rows whose trade type is neither buy nor sell",
    )
    parser.add_argument(
        "--model",
        default=ExtractorConfig().model,
        help="Vision model used for image inputs",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="trade_analytics",
        description="Trade Analytics - Trade History Performance Analysis",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # summary command
    summary_parser = subparsers.add_parser("summary", help="Show KPI dashboard")
    _add_input_arguments(summary_parser)

    # charts command
    charts_parser = subparsers.add_parser("charts", help="Show monthly series")
    _add_input_arguments(charts_parser)

    # trades command
    trades_parser = subparsers.add_parser("trades", help="Show trade table")
    _add_input_arguments(trades_parser)
    trades_parser.add_argument(
        "--sort",
        default="opened_at",
        choices=TABLE_COLUMNS,
        help="Sort column",
    )
    trades_parser.add_argument(
        "--desc",
        action="store_true",
        help="Sort descending",
    )

    # export command
    export_parser = subparsers.add_parser("export", help="Write report files")
    _add_input_arguments(export_parser)
    export_parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output filename (without extension)",
    )
    export_parser.add_argument(
        "-f", "--formats",
        default="csv",
        type=_formats_arg,
        help="Output formats (comma-separated: csv,xlsx,parquet)",
    )
    export_parser.add_argument(
        "-d", "--output-dir",
        default=".",
        help="Output directory",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    commands = {
        "summary": cmd_summary,
        "charts": cmd_charts,
        "trades": cmd_trades,
        "export": cmd_export,
    }

    try:
        return commands[args.command](args)
    except (FormatError, ExtractionError, RepositoryError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
