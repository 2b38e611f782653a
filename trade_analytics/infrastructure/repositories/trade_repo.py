"""Trade Repositories: Access to imported trade statements.

Two sources are supported:
- CsvTradeRepository: a single CSV export from the broker
- ImageTradeRepository: one or more statement screenshots, each turned
  into CSV by an ImageToTableExtractor

Both produce the same statement text contract and share parsing and
caching. Parse failures (FormatError) propagate unchanged.
"""

from __future__ import annotations

import logging
import mimetypes
from abc import abstractmethod
from pathlib import Path
from typing import Sequence

from trade_analytics.domain.models import TradeRecord
from trade_analytics.infrastructure.config import DEFAULT_PARSER_CONFIG, ParserConfig
from trade_analytics.infrastructure.csv_parser import (
    ParseResult,
    SkippedRow,
    combine_csv_fragments,
    parse_trades_detailed,
)
from trade_analytics.infrastructure.extractors import ImageToTableExtractor
from trade_analytics.infrastructure.repositories.base import Repository, RepositoryError

logger = logging.getLogger(__name__)

# Formats accepted by the extraction service
IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


class TradeRepository(Repository[tuple[TradeRecord, ...]]):
    """Common base for statement sources.

    Subclasses provide the statement text; this class parses it once
    and caches the result.
    """

    def __init__(self, config: ParserConfig = DEFAULT_PARSER_CONFIG):
        self._config = config
        self._cache: ParseResult | None = None

    @property
    @abstractmethod
    def source_label(self) -> str:
        """Human-readable name of the source (used for report names)."""
        pass

    @abstractmethod
    def load_text(self) -> str:
        """Read the raw statement text.

        Raises:
            RepositoryError: If the source cannot be read
        """
        pass

    def get_all(self) -> tuple[TradeRecord, ...]:
        """Load and parse all trades from the source.

        Returns:
            Trades in statement order (possibly empty if every row was invalid)

        Raises:
            RepositoryError: If the source cannot be read
            FormatError: If the statement structure is invalid
        """
        if self._cache is None:
            self._cache = parse_trades_detailed(self.load_text(), self._config)
        return self._cache.records

    @property
    def skipped(self) -> tuple[SkippedRow, ...]:
        """Rows dropped while parsing (empty before get_all)."""
        return self._cache.skipped if self._cache else ()

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._cache = None


class CsvTradeRepository(TradeRepository):
    """Trades from a CSV statement file.

    Example:
        >>> repo = CsvTradeRepository(Path("trades.csv"))
        >>> trades = repo.get_all()
    """

    def __init__(self, path: Path, config: ParserConfig = DEFAULT_PARSER_CONFIG):
        super().__init__(config)
        self._path = Path(path)

    @property
    def source_label(self) -> str:
        return self._path.name

    def load_text(self) -> str:
        if not self._path.exists():
            raise RepositoryError("Trade file not found", str(self._path))
        try:
            # utf-8-sig drops the BOM spreadsheet exports like to add
            return self._path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise RepositoryError(f"Failed to read trade file: {e}", str(self._path))


class ImageTradeRepository(TradeRepository):
    """Trades from statement screenshots.

    Images are sent to the extractor one at a time, in the given order.
    The CSV fragments are merged (single header) and parsed once.

    Example:
        >>> repo = ImageTradeRepository([Path("p1.png"), Path("p2.png")], extractor)
        >>> trades = repo.get_all()
    """

    def __init__(
        self,
        paths: Sequence[Path],
        extractor: ImageToTableExtractor,
        config: ParserConfig = DEFAULT_PARSER_CONFIG,
    ):
        super().__init__(config)
        self._paths = [Path(p) for p in paths]
        self._extractor = extractor

    @property
    def source_label(self) -> str:
        return f"{len(self._paths)}_images"

    def load_text(self) -> str:
        """Extract every image and merge the results.

        Raises:
            RepositoryError: If an image cannot be read
            ExtractionError: If the extractor fails on any image
            FormatError: If no image produced any text
        """
        fragments = []
        for i, path in enumerate(self._paths, 1):
            logger.info("Analyzing image %d of %d: %s", i, len(self._paths), path.name)
            fragment = self._extractor.extract(
                self._read_bytes(path),
                image_mime_type(path) or "application/octet-stream",
            )
            if fragment:
                fragments.append(fragment)
        return combine_csv_fragments(fragments)

    def _read_bytes(self, path: Path) -> bytes:
        if not path.exists():
            raise RepositoryError("Image file not found", str(path))
        try:
            return path.read_bytes()
        except OSError as e:
            raise RepositoryError(f"Failed to read image: {e}", str(path))


def image_mime_type(path: Path) -> str | None:
    """MIME type of an image path, or None if the path is not an image."""
    mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower())
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(str(path))
    if mime_type and mime_type.startswith("image/"):
        return mime_type
    return None
