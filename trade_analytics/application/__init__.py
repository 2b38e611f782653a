"""Application Layer: Use cases and service orchestration.

This layer contains:
- services/: Business logic orchestration
  - importer.py: File selection -> trades
  - analysis.py: Filtering, KPIs and chart data for one run
  - report.py: CSV / Excel / Parquet export
"""

from trade_analytics.application.services import (
    TradeImportService,
    ImportResult,
    TradeAnalyzer,
    TradeFilter,
    AnalysisResult,
    ReportService,
    ReportConfig,
)

__all__ = [
    "TradeImportService",
    "ImportResult",
    "TradeAnalyzer",
    "TradeFilter",
    "AnalysisResult",
    "ReportService",
    "ReportConfig",
]
