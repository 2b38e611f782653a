"""Infrastructure layer for Trade Analytics.

Contains:
- config: Parser and extractor settings
- csv_parser: Statement text -> trades
- extractors: Statement images -> CSV text
- repositories: Trade sources (CSV files, images)
- logging: Console logging setup
"""

from trade_analytics.infrastructure.config import (
    REQUIRED_COLUMNS,
    ParserConfig,
    ExtractorConfig,
    DEFAULT_PARSER_CONFIG,
    DEFAULT_EXTRACTOR_CONFIG,
)
from trade_analytics.infrastructure.csv_parser import (
    FormatError,
    ParseResult,
    SkippedRow,
    parse_trades,
    parse_trades_detailed,
    combine_csv_fragments,
)
from trade_analytics.infrastructure.extractors import (
    ExtractionError,
    ImageToTableExtractor,
    OpenAITableExtractor,
)
from trade_analytics.infrastructure.repositories import (
    Repository,
    RepositoryError,
    TradeRepository,
    CsvTradeRepository,
    ImageTradeRepository,
)

__all__ = [
    # Config
    "REQUIRED_COLUMNS",
    "ParserConfig",
    "ExtractorConfig",
    "DEFAULT_PARSER_CONFIG",
    "DEFAULT_EXTRACTOR_CONFIG",
    # Parsing
    "FormatError",
    "ParseResult",
    "SkippedRow",
    "parse_trades",
    "parse_trades_detailed",
    "combine_csv_fragments",
    # Extraction
    "ExtractionError",
    "ImageToTableExtractor",
    "OpenAITableExtractor",
    # Repositories
    "Repository",
    "RepositoryError",
    "TradeRepository",
    "CsvTradeRepository",
    "ImageTradeRepository",
]
