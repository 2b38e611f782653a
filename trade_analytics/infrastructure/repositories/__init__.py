"""Data repositories for Trade Analytics.

Provides abstracted access to trade statements through the Repository pattern:
- TradeRepository: Shared parsing and caching
- CsvTradeRepository: CSV statement files
- ImageTradeRepository: Statement screenshots via an image extractor
"""

from trade_analytics.infrastructure.repositories.base import Repository, RepositoryError
from trade_analytics.infrastructure.repositories.trade_repo import (
    TradeRepository,
    CsvTradeRepository,
    ImageTradeRepository,
    image_mime_type,
)

__all__ = [
    "Repository",
    "RepositoryError",
    "TradeRepository",
    "CsvTradeRepository",
    "ImageTradeRepository",
    "image_mime_type",
]
