"""CSV Parser: Raw statement text -> validated, deduplicated trades.

Rules:
- The first non-blank line is the header; header cells are matched
  case-insensitively with all whitespace removed.
- Missing required columns, or no data lines at all, raise FormatError.
  Nothing is returned in that case.
- Every data row is checked on its own. A malformed row (bad amount,
  bad date, empty pair, duplicate) is skipped and logged; it never
  aborts the batch.
- Duplicate rows share (start time, pair); the first one in file order
  is kept.

Cells are split on the delimiter only. Quoted fields are NOT unescaped,
so a quoted "1,200" arrives as two cells. The CSV export does quote
comma-containing cells, so the two sides are not symmetric.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from trade_analytics.domain.models import Side, TradeRecord
from trade_analytics.infrastructure.config import (
    DEFAULT_PARSER_CONFIG,
    REQUIRED_COLUMNS,
    ParserConfig,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class FormatError(ValueError):
    """Raised when input text cannot be parsed as a trade statement."""

    def __init__(
        self,
        message: str,
        missing_columns: tuple[str, ...] = (),
        found_columns: tuple[str, ...] = (),
    ):
        self.missing_columns = missing_columns
        self.found_columns = found_columns
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class SkippedRow:
    """A data row that was dropped during parsing.

    Attributes:
        line_number: 1-based line number in the input text
        reason: Short machine-friendly reason
        line: The raw line
    """
    line_number: int
    reason: str
    line: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Trades that survived parsing plus the rows that did not."""
    records: tuple[TradeRecord, ...]
    skipped: tuple[SkippedRow, ...]


# =============================================================================
# Cell Parsing
# =============================================================================

def normalize_header(name: str) -> str:
    """Lower-case a header cell and drop all whitespace."""
    return _WHITESPACE.sub("", name.strip().lower())


def parse_amount(
    value: str | None,
    config: ParserConfig = DEFAULT_PARSER_CONFIG,
) -> float | None:
    """Parse a PNL cell such as "$1,200" or "-50.25".

    Returns:
        The amount, or None if the cell is not a finite number
    """
    if value is None:
        return None
    cleaned = value.strip()
    for symbol in config.currency_symbols:
        cleaned = cleaned.replace(symbol, "")
    if config.thousands_separator:
        cleaned = cleaned.replace(config.thousands_separator, "")
    cleaned = cleaned.strip()
    if not cleaned:
        return None
    try:
        amount = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return amount


def parse_side(value: str | None, strict: bool = False) -> Side | None:
    """Map a trade-type cell to "buy" / "sell".

    Anything other than "buy" is read as "sell" unless strict is set,
    in which case only "buy" and "sell" are accepted.
    """
    normalized = (value or "").strip().lower()
    if normalized == "buy":
        return "buy"
    if strict and normalized != "sell":
        return None
    return "sell"


def parse_timestamp(
    value: str | None,
    formats: Iterable[str] = DEFAULT_PARSER_CONFIG.date_formats,
) -> datetime | None:
    """Parse a start-date cell into a UTC datetime.

    ISO-8601 is tried first, then each strptime format in order.
    Values without an offset are taken as UTC.
    """
    text = (value or "").strip()
    if not text:
        return None

    parsed = None
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        for fmt in formats:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# =============================================================================
# Statement Parsing
# =============================================================================

def _cell(cells: list[str], index: int) -> str | None:
    if index >= len(cells):
        return None
    return cells[index].strip()


def _column_indexes(header_line: str, config: ParserConfig) -> dict[str, int]:
    headers = [normalize_header(h) for h in header_line.split(config.delimiter)]

    missing = tuple(
        normalized for normalized in REQUIRED_COLUMNS.values()
        if normalized not in headers
    )
    if missing:
        raise FormatError(
            f"Missing required columns: {', '.join(missing)}. "
            f"Found: {', '.join(headers)}",
            missing_columns=missing,
            found_columns=tuple(headers),
        )

    return {
        logical: headers.index(normalized)
        for logical, normalized in REQUIRED_COLUMNS.items()
    }


def parse_trades_detailed(
    text: str,
    config: ParserConfig = DEFAULT_PARSER_CONFIG,
) -> ParseResult:
    """Parse statement text, keeping track of skipped rows.

    Args:
        text: Full CSV text including the header row
        config: Parser settings

    Returns:
        ParseResult with trades in input order

    Raises:
        FormatError: If the text is empty, header-only, or lacks a
            required column
    """
    lines = [
        (number, line)
        for number, line in enumerate(text.splitlines(), 1)
        if line.strip()
    ]
    if len(lines) < 2:
        raise FormatError("CSV is empty or contains only a header.")

    columns = _column_indexes(lines[0][1], config)

    records: list[TradeRecord] = []
    skipped: list[SkippedRow] = []
    seen: set[tuple[str, str]] = set()

    def skip(number: int, line: str, reason: str) -> None:
        logger.warning("Skipping row %d (%s): %s", number, reason, line)
        skipped.append(SkippedRow(line_number=number, reason=reason, line=line))

    for number, line in lines[1:]:
        cells = line.split(config.delimiter)

        amount = parse_amount(_cell(cells, columns["profit_or_loss"]), config)
        if amount is None:
            skip(number, line, "invalid profit/loss")
            continue

        side = parse_side(_cell(cells, columns["trade_type"]), config.strict_side)
        if side is None:
            skip(number, line, "unrecognized trade type")
            continue

        opened_at = parse_timestamp(_cell(cells, columns["start_date"]), config.date_formats)
        if opened_at is None:
            skip(number, line, "invalid start date")
            continue

        pair = _cell(cells, columns["pair"])
        if not pair:
            skip(number, line, "missing pair")
            continue

        key = (opened_at.isoformat(), pair)
        if key in seen:
            skip(number, line, "duplicate trade")
            continue
        seen.add(key)

        records.append(
            TradeRecord(
                pair=pair,
                opened_at=opened_at,
                status=_cell(cells, columns["status"]) or "",
                side=side,
                profit_or_loss=amount,
            )
        )

    logger.info("Parsed %d trades (%d rows skipped)", len(records), len(skipped))
    return ParseResult(records=tuple(records), skipped=tuple(skipped))


def parse_trades(
    text: str,
    config: ParserConfig = DEFAULT_PARSER_CONFIG,
) -> list[TradeRecord]:
    """Parse statement text into trades (see parse_trades_detailed)."""
    return list(parse_trades_detailed(text, config).records)


def combine_csv_fragments(fragments: Iterable[str]) -> str:
    """Merge several CSV texts into one, keeping a single header.

    The header comes from the first fragment; every fragment contributes
    its non-blank lines after its own header.

    Raises:
        FormatError: If no fragment contains any text
    """
    parts = [
        [line.strip() for line in fragment.splitlines() if line.strip()]
        for fragment in fragments
    ]
    parts = [lines for lines in parts if lines]
    if not parts:
        raise FormatError("Could not extract any data from the provided images.")

    rows = [parts[0][0]]
    for lines in parts:
        rows.extend(lines[1:])
    return "\n".join(rows)
