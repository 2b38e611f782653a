"""Configuration: Centralized import and extraction settings.

This module provides:
- REQUIRED_COLUMNS: Logical column -> normalized header name
- ParserConfig: Parameters for CSV trade parsing
- ExtractorConfig: Parameters for the image-to-CSV service

Expected CSV layout:
    Pair,Start Date,Status,Trade Type,Profit/Loss
    EUR/USD,2024-01-05 09:30:00,Closed,buy,100
    EUR/USD,2024-01-06 14:00:00,Closed,sell,-50

Headers are matched case-insensitively with all whitespace removed,
so "START DATE", "start date" and "StartDate" are equivalent.
"""

from dataclasses import dataclass

REQUIRED_COLUMNS: dict[str, str] = {
    "pair": "pair",
    "start_date": "startdate",
    "status": "status",
    "trade_type": "tradetype",
    "profit_or_loss": "profit/loss",
}

# Tried in order after ISO-8601
DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %I:%M:%S %p",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y",
    "%m/%d/%y %H:%M:%S",
    "%m/%d/%y",
    "%d %b %Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y",
)

EXTRACTION_PROMPT = """
You are an expert at analyzing images of financial trading statements.
Extract the trading data from the provided image.
The data should be formatted as a CSV with the following headers: 'Pair', 'Start Date', 'Status', 'Trade Type', 'Profit/Loss'.
- 'Pair': The currency or stock pair, e.g., EUR/USD.
- 'Start Date': The date the trade was opened. Format as YYYY-MM-DD HH:mm:ss if possible, otherwise use the format in the image.
- 'Status': The status of the trade, e.g., 'Closed', 'Open'.
- 'Trade Type': Must be either 'buy' or 'sell'.
- 'Profit/Loss': A number representing the profit or loss. Do not include currency symbols or commas. A loss should be a negative number.

Ensure the output is ONLY the CSV text, including the header row. Do not include any other explanatory text or markdown formatting.
""".strip()


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for CSV trade parsing.

    Attributes:
        delimiter: Cell separator (no quoted-field support)
        currency_symbols: Characters stripped from PNL cells
        thousands_separator: Grouping character stripped from PNL cells
        strict_side: Skip rows whose trade type is neither buy nor sell
            (default: treat anything that is not "buy" as "sell")
        date_formats: strptime formats tried after ISO-8601
    """

    delimiter: str = ","
    currency_symbols: str = "$€£¥"
    thousands_separator: str = ","
    strict_side: bool = False
    date_formats: tuple[str, ...] = DATE_FORMATS


@dataclass(frozen=True)
class ExtractorConfig:
    """Configuration for the image-to-CSV extraction service.

    The API key is read by the client from OPENAI_API_KEY.

    Attributes:
        model: Vision-capable model name
        prompt: Instruction sent alongside each image
    """

    model: str = "gpt-4.1-mini"
    prompt: str = EXTRACTION_PROMPT


# Default instances
DEFAULT_PARSER_CONFIG = ParserConfig()
DEFAULT_EXTRACTOR_CONFIG = ExtractorConfig()
