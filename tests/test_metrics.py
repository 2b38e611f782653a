"""Unit tests for domain/metrics/.

Tests verify:
1. KPI totals, averages and win rate
2. Streak detection (longest and current)
3. Monthly chart series
4. Cross-checks between KPI and chart aggregations
"""

from datetime import datetime, timezone

import pytest

from trade_analytics.domain.models import KPISummary, TradeRecord
from trade_analytics.domain.metrics import (
    calculate_chart_data,
    calculate_current_streak,
    calculate_kpis,
    calculate_longest_streaks,
    calculate_streaks,
    group_by_month,
)

UTC = timezone.utc


def _trade(pnl, day, month=1, year=2024, pair="EUR/USD", side="buy", hour=0):
    return TradeRecord(
        pair=pair,
        opened_at=datetime(year, month, day, hour, tzinfo=UTC),
        status="Closed",
        side=side,
        profit_or_loss=float(pnl),
    )


def _sequence(*pnls):
    """One trade per day in January 2024, in the given order."""
    return [_trade(pnl, day=i + 1) for i, pnl in enumerate(pnls)]


# =============================================================================
# calculate_kpis Tests
# =============================================================================

class TestCalculateKpis:
    """Tests for calculate_kpis function."""

    def test_empty_input(self):
        """Empty input returns the zero summary without raising."""
        kpis = calculate_kpis([])
        assert kpis == KPISummary.empty()
        assert kpis.current_streak_type == "none"

    def test_win_then_loss_scenario(self):
        """+100 on Jan 5, -50 on Jan 6."""
        kpis = calculate_kpis([
            _trade(100, day=5, side="buy"),
            _trade(-50, day=6, side="sell"),
        ])

        assert kpis.final_pnl == pytest.approx(50)
        assert kpis.total_trades == 2
        assert kpis.total_wins == 1
        assert kpis.total_losses == 1
        assert kpis.win_rate == pytest.approx(50)
        assert kpis.current_streak_type == "loss"
        assert kpis.current_streak == 1
        assert kpis.total_profit == pytest.approx(100)
        assert kpis.total_loss == pytest.approx(-50)
        assert kpis.highest_profit == pytest.approx(100)
        assert kpis.highest_loss == pytest.approx(-50)
        # Fri and Sat of ISO week 1: one week, one month
        assert kpis.weekly_avg_pnl == pytest.approx(50)
        assert kpis.monthly_avg_pnl == pytest.approx(50)
        assert kpis.avg_trades_per_week == pytest.approx(2)
        assert kpis.avg_trades_per_month == pytest.approx(2)

    def test_averages_over_active_buckets(self):
        """Averages divide by weeks/months that have trades."""
        kpis = calculate_kpis([
            _trade(100, day=2, month=1),   # 2024-W01
            _trade(-40, day=9, month=1),   # 2024-W02
            _trade(60, day=5, month=2),    # 2024-W06
        ])

        assert kpis.weekly_avg_pnl == pytest.approx(120 / 3)
        assert kpis.monthly_avg_pnl == pytest.approx(60)
        assert kpis.avg_trades_per_week == pytest.approx(1.0)
        assert kpis.avg_trades_per_month == pytest.approx(1.5)

    def test_flat_trades_count_toward_total_only(self):
        """PNL of exactly zero is neither a win nor a loss."""
        kpis = calculate_kpis(_sequence(10, 0, 20))

        assert kpis.total_trades == 3
        assert kpis.total_wins == 2
        assert kpis.total_losses == 0
        assert kpis.flat_trades == 1
        assert kpis.win_rate == pytest.approx(200 / 3)
        assert kpis.highest_loss == 0

    def test_no_losses_highest_loss_zero(self):
        """highest_loss defaults to 0 when there are no losses."""
        kpis = calculate_kpis(_sequence(5, 15))
        assert kpis.highest_loss == 0
        assert kpis.highest_profit == pytest.approx(15)
        assert kpis.win_rate == pytest.approx(100)

    def test_order_independent(self):
        """Shuffled input gives the same summary."""
        trades = _sequence(10, -20, 30, 0, -5, 40)
        assert calculate_kpis(trades) == calculate_kpis(list(reversed(trades)))
        assert calculate_kpis(trades).final_pnl == pytest.approx(sum(t.profit_or_loss for t in trades))

    def test_streaks_use_time_order_not_input_order(self):
        """Current streak is taken from the chronologically last trade."""
        latest_loss = _trade(-10, day=20)
        earlier_wins = [_trade(5, day=1), _trade(5, day=2)]
        kpis = calculate_kpis([latest_loss] + earlier_wins)
        assert kpis.current_streak_type == "loss"
        assert kpis.current_streak == 1
        assert kpis.longest_win_streak == 2

    def test_input_not_mutated(self):
        """The caller's list is left in its original order."""
        trades = [_trade(1, day=9), _trade(2, day=1)]
        snapshot = list(trades)
        calculate_kpis(trades)
        assert trades == snapshot

    @pytest.mark.parametrize(
        "pnls",
        [(1,), (-1,), (0,), (1, -1, 0, 0), (5, 5, -5, 0, 3, -2, -2)],
    )
    def test_invariants(self, pnls):
        """Win rate in [0, 100], wins + losses <= trades, streak bounds."""
        kpis = calculate_kpis(_sequence(*pnls))
        assert 0 <= kpis.win_rate <= 100
        assert kpis.total_wins + kpis.total_losses <= kpis.total_trades
        assert kpis.highest_profit >= 0
        assert kpis.highest_loss <= 0
        if kpis.current_streak_type == "win":
            assert kpis.longest_win_streak >= kpis.current_streak
        if kpis.current_streak_type == "loss":
            assert kpis.longest_loss_streak >= kpis.current_streak


# =============================================================================
# Streak Tests
# =============================================================================

class TestStreaks:
    """Tests for streak functions."""

    def test_longest_streaks(self):
        """Longest win and loss runs."""
        trades = _sequence(1, 2, -1, -2, -3, 5)
        assert calculate_longest_streaks(trades) == (2, 3)

    def test_flat_trade_breaks_streak(self):
        """A zero-PNL trade resets the run in progress."""
        trades = _sequence(1, 1, 0, 1, 1, 1)
        assert calculate_longest_streaks(trades) == (3, 0)

    def test_current_streak_win(self):
        """Current streak counts back from the last trade."""
        trades = _sequence(-20, 10, 30)
        assert calculate_current_streak(trades) == (2, "win")

    def test_current_streak_flat_last(self):
        """A flat last trade means no current streak."""
        trades = _sequence(10, 20, 0)
        assert calculate_current_streak(trades) == (0, "none")

    def test_current_streak_stops_at_flat(self):
        """Walking back stops at a flat trade."""
        trades = _sequence(-1, -1, 0, -1)
        assert calculate_current_streak(trades) == (1, "loss")

    def test_current_streak_empty(self):
        """No trades, no streak."""
        assert calculate_current_streak([]) == (0, "none")

    def test_calculate_streaks(self):
        """StreakStats combines both calculations."""
        stats = calculate_streaks(_sequence(1, 1, 1, -1, -1))
        assert stats.longest_win_streak == 3
        assert stats.longest_loss_streak == 2
        assert stats.current_streak == 2
        assert stats.current_streak_type == "loss"


# =============================================================================
# calculate_chart_data Tests
# =============================================================================

class TestCalculateChartData:
    """Tests for calculate_chart_data function."""

    def test_empty_input(self):
        """Empty input yields empty series."""
        series = calculate_chart_data([])
        assert series.is_empty is True
        assert series.monthly_high_low == ()

    def test_same_month_high_low(self):
        """+300 and -100 in one month."""
        series = calculate_chart_data([_trade(300, day=3), _trade(-100, day=20)])

        assert len(series.monthly_pnl) == 1
        assert series.monthly_pnl[0].label == "0124"
        assert series.monthly_pnl[0].pnl == pytest.approx(200)
        assert series.monthly_high_low[0].highest == pytest.approx(300)
        assert series.monthly_high_low[0].lowest == pytest.approx(-100)

    def test_months_sorted_ascending(self):
        """Months come out in calendar order regardless of input order."""
        series = calculate_chart_data([
            _trade(1, day=1, month=3, year=2024),
            _trade(2, day=1, month=1, year=2024),
            _trade(3, day=1, month=12, year=2023),
        ])
        assert [p.label for p in series.monthly_pnl] == ["1223", "0124", "0324"]
        assert [h.label for h in series.monthly_high_low] == ["1223", "0124", "0324"]

    def test_only_wins_or_only_losses(self):
        """Missing side of the month defaults to 0."""
        series = calculate_chart_data([
            _trade(50, day=1, month=1),
            _trade(80, day=2, month=1),
            _trade(-30, day=1, month=2),
        ])
        jan, feb = series.monthly_high_low
        assert (jan.highest, jan.lowest) == (80, 0)
        assert (feb.highest, feb.lowest) == (0, -30)

    def test_month_uses_utc(self):
        """Month grouping is done on the UTC timestamp."""
        series = calculate_chart_data([_trade(10, day=31, month=1, hour=23)])
        assert series.monthly_pnl[0].label == "0124"

    def test_group_by_month_keeps_time_order(self):
        """Values inside a month follow trade time."""
        months = group_by_month([_trade(2, day=20), _trade(1, day=3)])
        assert months == {"2024-01": [1.0, 2.0]}

    def test_chart_sum_matches_final_pnl(self):
        """Summing monthly PNL reproduces the KPI final_pnl."""
        trades = [
            _trade(120, day=3, month=1),
            _trade(-45.5, day=17, month=1),
            _trade(0, day=2, month=2),
            _trade(310, day=28, month=2),
            _trade(-80, day=1, month=4),
        ]
        series = calculate_chart_data(trades)
        kpis = calculate_kpis(trades)
        assert sum(p.pnl for p in series.monthly_pnl) == pytest.approx(kpis.final_pnl)
