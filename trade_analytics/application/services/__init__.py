"""Application Services for Trade Analytics.

Services orchestrate repositories and domain logic to implement use cases.

Available services:
- TradeImportService: Load trades from a CSV file or statement images
- TradeAnalyzer: Filter trades and compute KPIs / chart data
- ReportService: Export an analysis to CSV, Excel or Parquet
"""

from trade_analytics.application.services.importer import (
    TradeImportService,
    ImportResult,
    is_csv_file,
    is_image_file,
)
from trade_analytics.application.services.analysis import (
    TradeAnalyzer,
    TradeFilter,
    AnalysisResult,
    TABLE_COLUMNS,
    unique_pairs,
    trades_frame,
    sort_trades,
)
from trade_analytics.application.services.report import (
    ReportService,
    ReportConfig,
    REPORT_FORMATS,
)

__all__ = [
    "TradeImportService",
    "ImportResult",
    "is_csv_file",
    "is_image_file",
    "TradeAnalyzer",
    "TradeFilter",
    "AnalysisResult",
    "TABLE_COLUMNS",
    "unique_pairs",
    "trades_frame",
    "sort_trades",
    "ReportService",
    "ReportConfig",
    "REPORT_FORMATS",
]
