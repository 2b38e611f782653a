"""Unit tests for infrastructure/csv_parser.py.

Tests verify:
1. Header validation (fatal errors)
2. Per-row recovery (malformed rows skipped, batch continues)
3. Deduplication keeps the first occurrence
4. Cell parsers for amounts, sides and timestamps
"""

from datetime import datetime, timezone

import pytest

from trade_analytics.domain.metrics import calculate_kpis
from trade_analytics.infrastructure.config import ParserConfig
from trade_analytics.infrastructure.csv_parser import (
    FormatError,
    combine_csv_fragments,
    normalize_header,
    parse_amount,
    parse_side,
    parse_timestamp,
    parse_trades,
    parse_trades_detailed,
)

UTC = timezone.utc
HEADER = "Pair,Start Date,Status,Trade Type,Profit/Loss"


def _csv(*rows, header=HEADER):
    return "\n".join((header,) + rows)


# =============================================================================
# Header Validation
# =============================================================================

class TestHeaderValidation:
    """Tests for fatal structural errors."""

    def test_missing_status_column(self):
        """Missing Status column names 'status' and returns nothing."""
        text = _csv(
            "EUR/USD,2024-01-05,buy,100",
            header="Pair,Start Date,Trade Type,Profit/Loss",
        )
        with pytest.raises(FormatError, match="status") as exc:
            parse_trades(text)
        assert exc.value.missing_columns == ("status",)
        assert "startdate" in exc.value.found_columns

    def test_missing_several_columns(self):
        """All missing columns are reported."""
        with pytest.raises(FormatError) as exc:
            parse_trades(_csv("x,y", header="Pair,Notes"))
        assert exc.value.missing_columns == ("startdate", "status", "tradetype", "profit/loss")

    def test_empty_input(self):
        """Empty text is fatal."""
        with pytest.raises(FormatError, match="empty"):
            parse_trades("")

    def test_blank_lines_only(self):
        """Whitespace-only text is fatal."""
        with pytest.raises(FormatError):
            parse_trades("\n   \n\t\n")

    def test_header_only(self):
        """A header without data rows is fatal."""
        with pytest.raises(FormatError, match="only a header"):
            parse_trades(HEADER + "\n\n")

    def test_header_case_and_whitespace_insensitive(self):
        """Headers match regardless of case and spacing."""
        text = _csv(
            "EUR/USD,2024-01-05,Closed,buy,100",
            header="  PAIR , start   date,STATUS,Trade type,PROFIT / LOSS",
        )
        trades = parse_trades(text)
        assert len(trades) == 1

    def test_column_order_does_not_matter(self):
        """Columns are located by name."""
        text = _csv(
            "100,buy,Closed,2024-01-05,GBP/USD",
            header="Profit/Loss,Trade Type,Status,Start Date,Pair",
        )
        trade = parse_trades(text)[0]
        assert trade.pair == "GBP/USD"
        assert trade.profit_or_loss == 100.0

    def test_normalize_header(self):
        """Lower-case, no whitespace."""
        assert normalize_header(" Start \t Date ") == "startdate"
        assert normalize_header("Profit/Loss") == "profit/loss"


# =============================================================================
# Row Parsing
# =============================================================================

class TestRowParsing:
    """Tests for per-row handling."""

    def test_duplicate_scenario(self):
        """Duplicate (time, pair) row is dropped; KPIs reflect two trades."""
        text = _csv(
            "EUR/USD,2024-01-05,Closed,buy,100",
            "EUR/USD,2024-01-06,Closed,sell,-50",
            "EUR/USD,2024-01-05,Closed,buy,100",
        )
        trades = parse_trades(text)
        assert len(trades) == 2

        kpis = calculate_kpis(trades)
        assert kpis.final_pnl == pytest.approx(50)
        assert kpis.total_wins == 1
        assert kpis.total_losses == 1
        assert kpis.win_rate == pytest.approx(50)
        assert kpis.current_streak_type == "loss"
        assert kpis.current_streak == 1

    def test_first_duplicate_wins(self):
        """The first occurrence in file order is kept."""
        text = _csv(
            "EUR/USD,2024-01-05 10:00:00,Closed,buy,100",
            "EUR/USD,2024-01-05 10:00:00,Open,sell,999",
        )
        result = parse_trades_detailed(text)
        assert len(result.records) == 1
        assert result.records[0].profit_or_loss == 100.0
        assert result.records[0].status == "Closed"
        assert result.skipped[0].reason == "duplicate trade"
        assert result.skipped[0].line_number == 3

    def test_duplicate_detected_across_timestamp_formats(self):
        """Same instant written two ways is still a duplicate."""
        text = _csv(
            "EUR/USD,2024-01-05 10:00:00,Closed,buy,100",
            "EUR/USD,2024-01-05T10:00:00Z,Closed,buy,100",
        )
        assert len(parse_trades(text)) == 1

    def test_same_time_different_pair_kept(self):
        """Dedup key includes the pair."""
        text = _csv(
            "EUR/USD,2024-01-05,Closed,buy,100",
            "GBP/USD,2024-01-05,Closed,buy,100",
        )
        assert len(parse_trades(text)) == 2

    def test_currency_amount(self):
        """"$1200" parses to 1200."""
        trade = parse_trades(_csv("EUR/USD,2024-01-05,Closed,buy,$1200"))[0]
        assert trade.profit_or_loss == 1200.0

    def test_non_numeric_amount_skipped(self):
        """A bad amount skips the row and the batch continues."""
        text = _csv(
            "EUR/USD,2024-01-05,Closed,buy,abc",
            "EUR/USD,2024-01-06,Closed,sell,-50",
        )
        result = parse_trades_detailed(text)
        assert [t.profit_or_loss for t in result.records] == [-50.0]
        assert result.skipped[0].reason == "invalid profit/loss"
        assert result.skipped[0].line_number == 2

    def test_quoted_amount_is_not_unescaped(self):
        """Quoted cells are split on the comma like any other text."""
        text = _csv('EUR/USD,2024-01-05,Closed,buy,"$1,200"')
        result = parse_trades_detailed(text)
        assert result.records == ()
        assert result.skipped[0].reason == "invalid profit/loss"

    def test_invalid_date_skipped(self):
        """An unparseable date skips the row."""
        result = parse_trades_detailed(_csv("EUR/USD,someday,Closed,buy,10"))
        assert result.records == ()
        assert result.skipped[0].reason == "invalid start date"

    def test_missing_pair_skipped(self):
        """An empty pair skips the row."""
        result = parse_trades_detailed(_csv(" ,2024-01-05,Closed,buy,10"))
        assert result.skipped[0].reason == "missing pair"

    def test_short_row_skipped(self):
        """A row with too few cells skips instead of failing."""
        result = parse_trades_detailed(_csv("EUR/USD,2024-01-05"))
        assert result.records == ()
        assert len(result.skipped) == 1

    def test_all_rows_invalid_returns_empty(self):
        """Zero surviving rows is not an error for the parser."""
        assert parse_trades(_csv("x,bad,Closed,buy,nope")) == []

    def test_unknown_trade_type_defaults_to_sell(self):
        """Lenient mode: anything that is not "buy" becomes "sell"."""
        text = _csv(
            "EUR/USD,2024-01-05,Closed,BUY,10",
            "EUR/USD,2024-01-06,Closed,short,10",
            "EUR/USD,2024-01-07,Closed,,10",
        )
        assert [t.side for t in parse_trades(text)] == ["buy", "sell", "sell"]

    def test_strict_side_skips_unknown_trade_type(self):
        """Strict mode: unknown trade types are skipped."""
        text = _csv(
            "EUR/USD,2024-01-05,Closed,Sell,10",
            "EUR/USD,2024-01-06,Closed,short,10",
        )
        result = parse_trades_detailed(text, ParserConfig(strict_side=True))
        assert [t.side for t in result.records] == ["sell"]
        assert result.skipped[0].reason == "unrecognized trade type"

    def test_input_order_preserved(self):
        """Records keep file order (no sorting on import)."""
        text = _csv(
            "B,2024-03-01,Closed,buy,1",
            "A,2024-01-01,Closed,buy,2",
        )
        assert [t.pair for t in parse_trades(text)] == ["B", "A"]

    def test_crlf_and_cell_whitespace(self):
        """Windows line endings and padded cells are handled."""
        text = HEADER + "\r\n" + " EUR/USD , 2024-01-05 , Closed , buy , 25.5 \r\n"
        trade = parse_trades(text)[0]
        assert trade.pair == "EUR/USD"
        assert trade.status == "Closed"
        assert trade.profit_or_loss == 25.5


# =============================================================================
# Cell Parsers
# =============================================================================

class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$1,200", 1200.0),
            ("-50.5", -50.5),
            (" 1,234.56 ", 1234.56),
            ("€300", 300.0),
            ("-$75", -75.0),
            ("0", 0.0),
        ],
    )
    def test_valid(self, raw, expected):
        """Currency symbols and thousands separators are stripped."""
        assert parse_amount(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["abc", "", "   ", "$", "nan", "inf", None])
    def test_invalid(self, raw):
        """Non-numeric or non-finite values give None."""
        assert parse_amount(raw) is None


class TestParseSide:
    """Tests for parse_side."""

    def test_lenient(self):
        """Only "buy" maps to buy."""
        assert parse_side(" Buy ") == "buy"
        assert parse_side("sell") == "sell"
        assert parse_side("long") == "sell"
        assert parse_side(None) == "sell"

    def test_strict(self):
        """Strict mode rejects unknown values."""
        assert parse_side("SELL", strict=True) == "sell"
        assert parse_side("long", strict=True) is None


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-01-05", datetime(2024, 1, 5, tzinfo=UTC)),
            ("2024-01-05 09:30:00", datetime(2024, 1, 5, 9, 30, tzinfo=UTC)),
            ("2024-01-05T09:30:00.000Z", datetime(2024, 1, 5, 9, 30, tzinfo=UTC)),
            ("2024-01-05T10:00:00+02:00", datetime(2024, 1, 5, 8, 0, tzinfo=UTC)),
            ("01/15/2024", datetime(2024, 1, 15, tzinfo=UTC)),
            ("2024/01/15 14:05", datetime(2024, 1, 15, 14, 5, tzinfo=UTC)),
        ],
    )
    def test_valid(self, raw, expected):
        """Supported formats parse to UTC."""
        assert parse_timestamp(raw) == expected

    @pytest.mark.parametrize("raw", ["not a date", "", None, "2024-13-45"])
    def test_invalid(self, raw):
        """Unparseable values give None."""
        assert parse_timestamp(raw) is None


# =============================================================================
# combine_csv_fragments Tests
# =============================================================================

class TestCombineCsvFragments:
    """Tests for merging extracted CSV fragments."""

    def test_single_header_kept(self):
        """Header from the first fragment, rows from all."""
        combined = combine_csv_fragments([
            HEADER + "\nEUR/USD,2024-01-05,Closed,buy,100\n",
            HEADER + "\n\nGBP/USD,2024-01-06,Closed,sell,-50",
        ])
        assert combined.splitlines() == [
            HEADER,
            "EUR/USD,2024-01-05,Closed,buy,100",
            "GBP/USD,2024-01-06,Closed,sell,-50",
        ]
        assert len(parse_trades(combined)) == 2

    def test_blank_fragments_ignored(self):
        """Fragments without text are dropped."""
        combined = combine_csv_fragments(["", "  \n", HEADER + "\nA,2024-01-05,Closed,buy,1"])
        assert combined.splitlines()[0] == HEADER

    def test_no_fragments(self):
        """Nothing extracted is fatal."""
        with pytest.raises(FormatError, match="Could not extract"):
            combine_csv_fragments([])
