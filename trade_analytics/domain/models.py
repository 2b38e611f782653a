"""Domain Models: Core data structures for trade analytics.

These models represent the fundamental business entities:
- TradeRecord: A single imported trade with its realized PNL
- KPISummary: Aggregate performance statistics for a set of trades
- MonthlyPnl / MonthlyHighLow / ChartSeries: Per-month series for plotting

Design Principles:
- Immutable (frozen dataclass)
- Validation in __post_init__
- Computed properties for derived values
- Type-safe with Literal types
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Iterable, Literal

# Type alias for trade direction
Side = Literal["buy", "sell"]

# Type alias for the sign of the running streak
StreakType = Literal["win", "loss", "none"]

SIDES: tuple[str, ...] = ("buy", "sell")


def to_utc(ts: datetime) -> datetime:
    """Normalize a timestamp to UTC (naive values are taken as UTC)."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class TradeRecord:
    """A single trade as imported from a statement.

    Attributes:
        pair: Instrument identifier (e.g., "EUR/USD")
        opened_at: Time the trade was opened (stored in UTC)
        status: Free-text status from the statement (e.g., "Closed")
        side: "buy" or "sell"
        profit_or_loss: Signed result in currency units

    Example:
        >>> trade = TradeRecord(
        ...     pair="EUR/USD",
        ...     opened_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
        ...     status="Closed",
        ...     side="buy",
        ...     profit_or_loss=100.0,
        ... )
        >>> trade.is_win
        True
    """

    pair: str
    opened_at: datetime
    status: str
    side: Side
    profit_or_loss: float

    def __post_init__(self) -> None:
        """Validate all fields after initialization."""
        if not self.pair or not self.pair.strip():
            raise ValueError("pair cannot be empty")
        if not isinstance(self.opened_at, datetime):
            raise ValueError(f"opened_at must be a datetime, got: {self.opened_at!r}")
        if self.side not in SIDES:
            raise ValueError(f"side must be 'buy' or 'sell', got: {self.side}")
        if not math.isfinite(self.profit_or_loss):
            raise ValueError(f"profit_or_loss must be finite, got: {self.profit_or_loss}")
        # frozen dataclass: bypass __setattr__ to store the normalized value
        object.__setattr__(self, "opened_at", to_utc(self.opened_at))

    @property
    def is_win(self) -> bool:
        """True if the trade closed with a profit."""
        return self.profit_or_loss > 0

    @property
    def is_loss(self) -> bool:
        """True if the trade closed with a loss."""
        return self.profit_or_loss < 0

    @property
    def outcome(self) -> int:
        """Sign of the result: 1 (win), -1 (loss) or 0 (flat)."""
        if self.profit_or_loss > 0:
            return 1
        if self.profit_or_loss < 0:
            return -1
        return 0

    @property
    def dedup_key(self) -> tuple[str, str]:
        """Identity used to collapse duplicate rows on import."""
        return (self.opened_at.isoformat(), self.pair)

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame creation."""
        return {
            "pair": self.pair,
            "opened_at": self.opened_at,
            "status": self.status,
            "side": self.side,
            "profit_or_loss": self.profit_or_loss,
        }


def chronological(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Return a new list sorted by opened_at.

    Python's sort is stable, so trades opened at the same instant keep
    their input order.
    """
    return sorted(records, key=lambda r: r.opened_at)


@dataclass(frozen=True, slots=True)
class KPISummary:
    """Aggregate performance statistics for a set of trades.

    Attributes:
        final_pnl: Sum of all profit_or_loss values
        total_profit: Sum over winning trades
        total_loss: Sum over losing trades (non-positive)
        win_rate: Percentage of trades that were wins (0-100)
        total_trades: Number of trades
        total_wins: Number of winning trades
        total_losses: Number of losing trades
        longest_win_streak: Longest run of consecutive wins
        longest_loss_streak: Longest run of consecutive losses
        current_streak: Length of the run ending at the latest trade
        current_streak_type: "win", "loss" or "none"
        highest_profit: Largest single win (0 if none)
        highest_loss: Largest single loss, as a negative number (0 if none)
        weekly_avg_pnl: Mean PNL per active week
        monthly_avg_pnl: Mean PNL per active month
        avg_trades_per_week: Trades per active week
        avg_trades_per_month: Trades per active month
    """

    final_pnl: float
    total_profit: float
    total_loss: float
    win_rate: float
    total_trades: int
    total_wins: int
    total_losses: int
    longest_win_streak: int
    longest_loss_streak: int
    current_streak: int
    current_streak_type: StreakType
    highest_profit: float
    highest_loss: float
    weekly_avg_pnl: float
    monthly_avg_pnl: float
    avg_trades_per_week: float
    avg_trades_per_month: float

    @classmethod
    def empty(cls) -> KPISummary:
        """Summary for a trade set with no trades."""
        return cls(
            final_pnl=0.0,
            total_profit=0.0,
            total_loss=0.0,
            win_rate=0.0,
            total_trades=0,
            total_wins=0,
            total_losses=0,
            longest_win_streak=0,
            longest_loss_streak=0,
            current_streak=0,
            current_streak_type="none",
            highest_profit=0.0,
            highest_loss=0.0,
            weekly_avg_pnl=0.0,
            monthly_avg_pnl=0.0,
            avg_trades_per_week=0.0,
            avg_trades_per_month=0.0,
        )

    @property
    def flat_trades(self) -> int:
        """Trades that closed at exactly zero."""
        return self.total_trades - self.total_wins - self.total_losses

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class MonthlyPnl:
    """Net PNL for one calendar month (label is "MMYY")."""
    label: str
    pnl: float


@dataclass(frozen=True, slots=True)
class MonthlyHighLow:
    """Best and worst single trade for one calendar month."""
    label: str
    highest: float
    lowest: float


@dataclass(frozen=True, slots=True)
class ChartSeries:
    """Per-month series, both ordered by month ascending."""
    monthly_pnl: tuple[MonthlyPnl, ...] = ()
    monthly_high_low: tuple[MonthlyHighLow, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.monthly_pnl

    def to_dict(self) -> dict:
        return {
            "monthly_pnl": [
                {"month": p.label, "pnl": p.pnl} for p in self.monthly_pnl
            ],
            "monthly_high_low": [
                {"month": h.label, "highest": h.highest, "lowest": h.lowest}
                for h in self.monthly_high_low
            ],
        }
