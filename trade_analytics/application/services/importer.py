"""Import Service: Turn a user's file selection into trades.

Accepted selections (anything else is rejected):
1. Exactly one CSV file
2. One or more image files (screenshots of statements)

A selection that parses to zero trades is treated as a failed import,
since the aggregations cannot tell "no data" from "every row invalid".
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from trade_analytics.domain.models import TradeRecord
from trade_analytics.infrastructure import (
    DEFAULT_PARSER_CONFIG,
    CsvTradeRepository,
    ExtractionError,
    FormatError,
    ImageTradeRepository,
    ImageToTableExtractor,
    ParserConfig,
    SkippedRow,
    TradeRepository,
)
from trade_analytics.infrastructure.repositories import image_mime_type

logger = logging.getLogger(__name__)


def is_csv_file(path: Path) -> bool:
    mime_type, _ = mimetypes.guess_type(str(path))
    return path.suffix.lower() == ".csv" or mime_type == "text/csv"


def is_image_file(path: Path) -> bool:
    return image_mime_type(path) is not None


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Trades loaded from one selection.

    Attributes:
        records: Parsed trades in statement order (never empty)
        source_label: File name, or "<n>_images" for screenshots
        skipped: Rows dropped while parsing
    """
    records: tuple[TradeRecord, ...]
    source_label: str
    skipped: tuple[SkippedRow, ...] = ()


class TradeImportService:
    """Loads trades from CSV files or statement images.

    Example:
        >>> service = TradeImportService()
        >>> result = service.load([Path("trades.csv")])
        >>> len(result.records)
        42
    """

    def __init__(
        self,
        extractor: ImageToTableExtractor | None = None,
        config: ParserConfig = DEFAULT_PARSER_CONFIG,
    ):
        """Initialize the service.

        Args:
            extractor: Image-to-CSV extractor (required only for images)
            config: Parser settings
        """
        self._extractor = extractor
        self._config = config

    def repository_for(self, paths: Sequence[Path]) -> TradeRepository:
        """Pick the repository that matches the selection.

        Raises:
            FormatError: If the selection is neither one CSV nor all images
            ExtractionError: If images are selected but no extractor is set
        """
        paths = [Path(p) for p in paths]
        if not paths:
            raise FormatError("No files selected.")

        if len(paths) == 1 and is_csv_file(paths[0]):
            return CsvTradeRepository(paths[0], self._config)

        if all(is_image_file(p) for p in paths):
            if self._extractor is None:
                raise ExtractionError("No image extractor configured for image import.")
            return ImageTradeRepository(paths, self._extractor, self._config)

        raise FormatError(
            "Invalid selection. Please upload a single CSV file or one or more image files."
        )

    def load(self, paths: Sequence[Path]) -> ImportResult:
        """Load and parse a selection.

        Raises:
            FormatError: Invalid selection, invalid statement, or no valid trades
            ExtractionError: Image extraction failed
            RepositoryError: A file could not be read
        """
        repo = self.repository_for(paths)
        records = repo.get_all()

        if not records:
            raise FormatError(
                f"No valid trades found in {repo.source_label} "
                f"({len(repo.skipped)} rows skipped)."
            )

        logger.info("Imported %d trades from %s", len(records), repo.source_label)
        return ImportResult(
            records=records,
            source_label=repo.source_label,
            skipped=repo.skipped,
        )
